"""Core data contracts for the freightflow shipment workflow."""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .constants import BILL_OF_LADING, PICKUP_REQUEST, RATE_QUOTE


class ArtifactKind(str, Enum):
    """Named outputs a completed step exposes to later steps."""

    SELECTED_QUOTE = "selectedQuote"
    BILL_OF_LADING_FORM = "billOfLadingForm"
    GENERATED_DOCUMENT_RESPONSE = "generatedDocumentResponse"
    GENERATED_REFERENCE_NUMBER = "generatedReferenceNumber"
    PICKUP_RESPONSE = "pickupResponse"

    @property
    def producing_step(self) -> int:
        return ARTIFACT_PRODUCERS[self]


ARTIFACT_PRODUCERS: Dict[ArtifactKind, int] = {
    ArtifactKind.SELECTED_QUOTE: RATE_QUOTE,
    ArtifactKind.BILL_OF_LADING_FORM: BILL_OF_LADING,
    ArtifactKind.GENERATED_DOCUMENT_RESPONSE: BILL_OF_LADING,
    ArtifactKind.GENERATED_REFERENCE_NUMBER: BILL_OF_LADING,
    ArtifactKind.PICKUP_RESPONSE: PICKUP_REQUEST,
}


class Outcome(str, Enum):
    OK = "ok"
    NOT_PERMITTED = "not_permitted"
    NOOP = "noop"


class TransitionResult(BaseModel):
    """Result of a workflow operation; never raised, always returned."""

    outcome: Outcome
    step_id: int
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.outcome is Outcome.OK

    @classmethod
    def ok(cls, step_id: int) -> "TransitionResult":
        return cls(outcome=Outcome.OK, step_id=step_id)

    @classmethod
    def rejected(cls, step_id: int, reason: str) -> "TransitionResult":
        return cls(outcome=Outcome.NOT_PERMITTED, step_id=step_id, reason=reason)

    @classmethod
    def noop(cls, step_id: int, reason: Optional[str] = None) -> "TransitionResult":
        return cls(outcome=Outcome.NOOP, step_id=step_id, reason=reason)


class StepDescriptor(BaseModel):
    """Defines one step in the shipment workflow."""

    id: int
    name: str
    component: str


class WorkflowState(BaseModel):
    """Everything one shipment-creation session has entered so far."""

    shipment_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    steps: List[StepDescriptor]
    current_step_id: int = 1
    completed_step_ids: Set[int] = Field(default_factory=set)
    step_drafts: Dict[int, Dict[str, Any]] = Field(default_factory=dict)
    carried_artifacts: Dict[str, Any] = Field(default_factory=dict)
    edited_fields: Dict[int, Set[str]] = Field(default_factory=dict)
    order_data: Optional[Dict[str, Any]] = None
    finished: bool = False

    @model_validator(mode="after")
    def _check_steps(self) -> "WorkflowState":
        if not self.steps:
            raise ValueError("workflow requires at least one step")
        ids = [step.id for step in self.steps]
        if ids != list(range(1, len(ids) + 1)):
            raise ValueError(f"step ids must run 1..{len(ids)} in order, got {ids}")
        if not 1 <= self.current_step_id <= len(self.steps):
            raise ValueError(
                f"current_step_id {self.current_step_id} outside 1..{len(self.steps)}"
            )
        return self

    def to_json(self) -> str:
        """Serialize state to JSON."""
        return self.model_dump_json()

    @classmethod
    def from_json(cls, data: str) -> "WorkflowState":
        """Deserialize state from JSON."""
        return cls.model_validate_json(data)


class DraftSnapshot(BaseModel):
    """Persisted copy of a WorkflowState plus the time it was taken."""

    model_config = ConfigDict(populate_by_name=True)

    payload: Dict[str, Any]
    saved_at_epoch_millis: int = Field(alias="savedAtEpochMillis")

    def age_millis(self, now_millis: int) -> int:
        return now_millis - self.saved_at_epoch_millis

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, data: str) -> "DraftSnapshot":
        return cls.model_validate_json(data)

    def to_state(self) -> WorkflowState:
        return WorkflowState.model_validate(self.payload)
