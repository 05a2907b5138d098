"""Step sequencing and completion tracking."""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Optional

from .constants import BILL_OF_LADING, PICKUP_REQUEST, RATE_QUOTE, SUMMARY
from .contracts import StepDescriptor, TransitionResult, WorkflowState

logger = logging.getLogger(__name__)

DEFAULT_STEPS: List[StepDescriptor] = [
    StepDescriptor(id=RATE_QUOTE, name="Rate Quote", component="RateQuote"),
    StepDescriptor(id=BILL_OF_LADING, name="Bill of Lading", component="BillOfLading"),
    StepDescriptor(id=PICKUP_REQUEST, name="Pickup Request", component="PickupRequest"),
    StepDescriptor(id=SUMMARY, name="Summary", component="Summary"),
]


def _party() -> Dict[str, Any]:
    return {
        "address": {
            "addressLine1": "",
            "cityName": "",
            "stateCd": "",
            "countryCd": "",
            "postalCd": "",
        },
        "contactInfo": {
            "companyName": "",
            "email": {"emailAddr": ""},
            "phone": {"phoneNbr": ""},
        },
    }


def _commodity() -> Dict[str, Any]:
    return {
        "pieceCnt": None,
        "grossWeight": {"weight": None, "weightUom": "LBS"},
        "dimensions": {
            "length": None,
            "width": None,
            "height": None,
            "dimensionsUom": "INCH",
        },
        "nmfcClass": "",
    }


_BLANK_DRAFTS: Dict[int, Dict[str, Any]] = {
    RATE_QUOTE: {
        "paymentTermCd": "",
        "shipmentDate": "",
        "shipperPostalCd": "",
        "consigneePostalCd": "",
        "deliveryPostalCode": "",
        "deliveryCountry": "",
        "accessorials": [],
        "commodities": [_commodity()],
    },
    BILL_OF_LADING: {
        "quoteNumber": "",
        "paymentTermCd": "",
        "shipDate": "",
        "destinationCity": "",
        "shipper": _party(),
        "consignee": _party(),
        "commodityLine": [],
    },
    PICKUP_REQUEST: {
        "proNbr": "",
        "pkupDate": "",
        "shipper": _party(),
        "requestor": {"companyName": "", "fullName": "", "email": "", "phone": ""},
        "contact": {"companyName": "", "fullName": "", "email": "", "phone": ""},
        "items": [],
    },
    SUMMARY: {
        "rateQuote": None,
        "billOfLading": None,
        "referenceNumber": "",
        "pickup": None,
    },
}


def blank_draft(step_id: int) -> Dict[str, Any]:
    """Return a fresh initial draft for ``step_id`` (empty dict if unknown)."""
    return copy.deepcopy(_BLANK_DRAFTS.get(step_id, {}))


def new_workflow_state(steps: Optional[List[StepDescriptor]] = None) -> WorkflowState:
    steps = list(steps or DEFAULT_STEPS)
    return WorkflowState(
        steps=[step.model_copy() for step in steps],
        current_step_id=steps[0].id,
        step_drafts={step.id: blank_draft(step.id) for step in steps},
        edited_fields={step.id: set() for step in steps},
    )


class StepGraph:
    """Forward, backward and jump transitions over a WorkflowState.

    The graph owns no data of its own; it reads and writes the step fields of
    the state it wraps. Rejected transitions leave the state untouched.
    """

    def __init__(self, state: WorkflowState) -> None:
        self._state = state

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def step_ids(self) -> List[int]:
        return [step.id for step in self._state.steps]

    @property
    def current_step_id(self) -> int:
        return self._state.current_step_id

    @property
    def current_step(self) -> StepDescriptor:
        return self.descriptor(self._state.current_step_id)

    @property
    def completed_step_ids(self) -> frozenset[int]:
        return frozenset(self._state.completed_step_ids)

    @property
    def last_step_id(self) -> int:
        return self._state.steps[-1].id

    def descriptor(self, step_id: int) -> StepDescriptor:
        for step in self._state.steps:
            if step.id == step_id:
                return step
        raise KeyError(step_id)

    def is_terminal(self, step_id: Optional[int] = None) -> bool:
        step_id = self._state.current_step_id if step_id is None else step_id
        return step_id == self.last_step_id

    def is_completed(self, step_id: int) -> bool:
        return step_id in self._state.completed_step_ids

    def complete(self, step_id: int) -> None:
        """Mark ``step_id`` completed; completion is never undone."""
        if step_id not in self.step_ids:
            raise KeyError(step_id)
        if step_id not in self._state.completed_step_ids:
            self._state.completed_step_ids.add(step_id)
            logger.info(f"Step {step_id} ({self.descriptor(step_id).name}) completed")

    def reachable_step_ids(self) -> List[int]:
        """Completed steps plus the one right after the highest completed step."""
        completed = self._state.completed_step_ids
        frontier = max(completed) + 1 if completed else self.step_ids[0]
        return [sid for sid in self.step_ids if sid in completed or sid == frontier]

    def can_jump_to(self, step_id: int) -> bool:
        return step_id in self.reachable_step_ids()

    def advance(self) -> TransitionResult:
        current = self._state.current_step_id
        if self.is_terminal(current):
            return TransitionResult.rejected(current, "already at the final step")
        self.complete(current)
        self._state.current_step_id = current + 1
        return TransitionResult.ok(current + 1)

    def retreat(self) -> TransitionResult:
        current = self._state.current_step_id
        if current <= self.step_ids[0]:
            return TransitionResult.rejected(current, "already at the first step")
        self._state.current_step_id = current - 1
        return TransitionResult.ok(current - 1)

    def jump_to(self, step_id: int) -> TransitionResult:
        current = self._state.current_step_id
        if step_id not in self.step_ids:
            return TransitionResult.rejected(current, f"unknown step {step_id}")
        if step_id == current:
            return TransitionResult.noop(current, "already on this step")
        if not self.can_jump_to(step_id):
            return TransitionResult.rejected(
                current, f"step {step_id} is not reachable yet"
            )
        self._state.current_step_id = step_id
        return TransitionResult.ok(step_id)
