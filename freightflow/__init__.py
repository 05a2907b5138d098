"""Freightflow: stateful multi-step shipment workflow for freight carriers."""

from .autopopulate import AutoPopulationResolver, AutoPopulationRule
from .carry_forward import CarryForwardBridge, CarryRule
from .contracts import (
    ArtifactKind,
    DraftSnapshot,
    Outcome,
    StepDescriptor,
    TransitionResult,
    WorkflowState,
)
from .controller import WorkflowController
from .persistence import DraftStore, get_draft_store
from .steps import DEFAULT_STEPS, StepGraph
from .tracking import FieldEditTracker

__version__ = "0.1.0"
__all__ = [
    "ArtifactKind",
    "AutoPopulationResolver",
    "AutoPopulationRule",
    "CarryForwardBridge",
    "CarryRule",
    "DEFAULT_STEPS",
    "DraftSnapshot",
    "DraftStore",
    "FieldEditTracker",
    "Outcome",
    "StepDescriptor",
    "StepGraph",
    "TransitionResult",
    "WorkflowController",
    "WorkflowState",
    "get_draft_store",
]
