"""Orchestrates the shipment workflow for one user session."""

from __future__ import annotations

import copy
import logging
import uuid
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .auth.tokens import TokenAccessor
from .autopopulate.resolver import AutoPopulationResolver, AutoPopulationRule
from .autopopulate.rules import DEFAULT_RULES
from .carry_forward import CarryForwardBridge, extract_reference_number
from .config import FreightflowConfig, load_config
from .contracts import (
    ArtifactKind,
    Outcome,
    StepDescriptor,
    TransitionResult,
    WorkflowState,
)
from .paths import apply_patch, set_path
from .persistence import DraftStore, get_draft_store
from .steps import StepGraph, new_workflow_state
from .tracking import FieldEditTracker

logger = logging.getLogger(__name__)


class WorkflowController:
    """Owns the WorkflowState of one shipment-creation session.

    Step transitions, field edits and artifact recording are synchronous and
    apply as a single patch. Saving and restoring drafts around an
    authentication interruption are the only awaited operations; while one is
    outstanding, or while the workflow is suspended waiting for a new login,
    every mutating call is refused. Each await is tagged with the session id
    it started under and its result is dropped if the session changed.
    """

    def __init__(
        self,
        draft_store: Optional[DraftStore] = None,
        resolver: Optional[AutoPopulationResolver] = None,
        bridge: Optional[CarryForwardBridge] = None,
        rules: Optional[Mapping[int, Sequence[AutoPopulationRule]]] = None,
        steps: Optional[List[StepDescriptor]] = None,
        grace_seconds: Optional[float] = None,
        config: Optional[FreightflowConfig] = None,
    ) -> None:
        self._store = draft_store or get_draft_store(config=config)
        auth = (config or load_config()).auth
        self._resolver = resolver or AutoPopulationResolver()
        self._bridge = bridge or CarryForwardBridge()
        self._rules = dict(DEFAULT_RULES if rules is None else rules)
        self._steps = steps
        self._grace_seconds = (
            auth.grace_seconds if grace_seconds is None else grace_seconds
        )
        self._carriers = list(auth.carriers)
        self.session_id = str(uuid.uuid4())
        self._state = new_workflow_state(steps)
        self._graph = StepGraph(self._state)
        self._suspended = False
        self._abandoned = False
        self._pending: Optional[str] = None
        self._resume_any_shipment = True

    # ------------------------------------------------------------------
    # Read access
    @property
    def state(self) -> WorkflowState:
        """A deep copy of the current state; mutate through the controller."""
        return self._state.model_copy(deep=True)

    @property
    def current_step_id(self) -> int:
        return self._state.current_step_id

    @property
    def completed_step_ids(self) -> frozenset[int]:
        return self._graph.completed_step_ids

    @property
    def suspended(self) -> bool:
        return self._suspended

    @property
    def busy(self) -> bool:
        return self._pending is not None

    @property
    def finished(self) -> bool:
        return self._state.finished

    def get_draft(self, step_id: int) -> Dict[str, Any]:
        return copy.deepcopy(self._state.step_drafts.get(step_id, {}))

    def get_artifact(self, kind: ArtifactKind | str) -> Any:
        return copy.deepcopy(self._state.carried_artifacts.get(ArtifactKind(kind).value))

    def tracker(self, step_id: int) -> FieldEditTracker:
        return FieldEditTracker(self._state.edited_fields.setdefault(step_id, set()))

    def reachable_step_ids(self) -> List[int]:
        return self._graph.reachable_step_ids()

    # ------------------------------------------------------------------
    # Session lifecycle
    def start_new_shipment(self, order_data: Optional[Mapping[str, Any]] = None) -> None:
        """Begin a brand-new shipment, dropping edits and drafts of the last one.

        A draft saved for an earlier shipment is never resumed into this one.
        """
        for step_id in list(self._state.edited_fields):
            self.tracker(step_id).reset()
        self.session_id = str(uuid.uuid4())
        self._suspended = False
        self._abandoned = False
        self._pending = None
        self._resume_any_shipment = False
        self._replace_state(new_workflow_state(self._steps))
        logger.info(f"Started shipment session {self.session_id}")
        if order_data:
            self.ingest_order_data(order_data)

    def abandon(self) -> None:
        """The user left; results of in-flight saves and restores are dropped."""
        logger.info(f"Session {self.session_id} abandoned")
        self.session_id = str(uuid.uuid4())
        self._pending = None
        self._abandoned = True

    def _replace_state(self, state: WorkflowState) -> None:
        self._state = state
        self._graph = StepGraph(state)

    def _blocked(self) -> Optional[str]:
        if self._abandoned:
            return "abandoned"
        if self._pending is not None:
            return "busy"
        if self._suspended:
            return "suspended"
        return None

    # ------------------------------------------------------------------
    # Data arrival and user edits
    def ingest_order_data(self, order_data: Mapping[str, Any]) -> Dict[int, Dict[str, Any]]:
        """Record an order and auto-fill every step draft it has rules for.

        Returns the patch written per step; empty when the workflow is blocked.
        """
        reason = self._blocked()
        if reason:
            logger.info(f"Ignoring order data while {reason}")
            return {}
        self._state.order_data = copy.deepcopy(dict(order_data))
        patches: Dict[int, Dict[str, Any]] = {}
        for step_id in self._graph.step_ids:
            patch = self._populate_from_order(step_id)
            if patch:
                patches[step_id] = patch
        return patches

    def update_field(self, step_id: int, field_path: str, value: Any) -> TransitionResult:
        """Apply a user edit; the field is never auto-filled afterwards."""
        reason = self._blocked()
        if reason:
            return TransitionResult.rejected(self.current_step_id, reason)
        if step_id not in self._graph.step_ids:
            return TransitionResult.rejected(self.current_step_id, f"unknown step {step_id}")
        self.tracker(step_id).mark_edited(field_path)
        draft = self._state.step_drafts.setdefault(step_id, {})
        set_path(draft, field_path, copy.deepcopy(value))
        return TransitionResult.ok(step_id)

    def record_artifact(self, kind: ArtifactKind | str, value: Any) -> TransitionResult:
        """Store an output of the current step for later steps to read."""
        current = self.current_step_id
        reason = self._blocked()
        if reason:
            return TransitionResult.rejected(current, reason)
        try:
            kind = ArtifactKind(kind)
        except ValueError:
            return TransitionResult.rejected(current, f"unknown artifact {kind}")
        if kind.producing_step != current:
            return TransitionResult.rejected(
                current,
                f"{kind.value} is produced by step {kind.producing_step}, not step {current}",
            )
        artifacts = self._state.carried_artifacts
        artifacts[kind.value] = copy.deepcopy(value)
        if kind is ArtifactKind.GENERATED_DOCUMENT_RESPONSE:
            reference = extract_reference_number(value)
            if reference:
                artifacts[ArtifactKind.GENERATED_REFERENCE_NUMBER.value] = reference
        logger.debug(f"Recorded artifact {kind.value} from step {current}")
        return TransitionResult.ok(current)

    def submit_step(self, artifacts: Optional[Mapping[str, Any]] = None) -> TransitionResult:
        """Record the current step's artifacts, then advance.

        Nothing is recorded when the workflow could not advance afterwards.
        """
        current = self.current_step_id
        reason = self._blocked()
        if reason is None and self.finished:
            reason = "workflow finished"
        if reason is None and self._graph.is_terminal():
            reason = "already at the final step"
        if reason:
            return TransitionResult.rejected(current, reason)
        for kind in artifacts or {}:
            try:
                known = ArtifactKind(kind)
            except ValueError:
                return TransitionResult.rejected(current, f"unknown artifact {kind}")
            if known.producing_step != current:
                return TransitionResult.rejected(
                    current,
                    f"{known.value} is produced by step {known.producing_step}, "
                    f"not step {current}",
                )
        for kind, value in (artifacts or {}).items():
            result = self.record_artifact(kind, value)
            if not result:
                return result
        return self.advance()

    # ------------------------------------------------------------------
    # Step transitions
    def advance(self) -> TransitionResult:
        reason = self._blocked()
        if reason:
            return TransitionResult.rejected(self.current_step_id, reason)
        if self.finished:
            return TransitionResult.rejected(self.current_step_id, "workflow finished")
        result = self._graph.advance()
        if result:
            self._enter(result.step_id)
        self._log_transition("advance", result)
        return result

    def retreat(self) -> TransitionResult:
        reason = self._blocked()
        if reason:
            return TransitionResult.rejected(self.current_step_id, reason)
        if self.finished:
            return TransitionResult.rejected(self.current_step_id, "workflow finished")
        result = self._graph.retreat()
        if result:
            self._enter(result.step_id)
        self._log_transition("retreat", result)
        return result

    def jump_to(self, step_id: int) -> TransitionResult:
        reason = self._blocked()
        if reason:
            return TransitionResult.rejected(self.current_step_id, reason)
        if self.finished:
            return TransitionResult.rejected(self.current_step_id, "workflow finished")
        result = self._graph.jump_to(step_id)
        if result:
            self._enter(result.step_id)
        self._log_transition(f"jump to {step_id}", result)
        return result

    async def finish(self) -> TransitionResult:
        """Submit the summary step; the workflow accepts no more transitions."""
        current = self.current_step_id
        reason = self._blocked()
        if reason:
            return TransitionResult.rejected(current, reason)
        if self.finished:
            return TransitionResult.noop(current, "workflow finished")
        if not self._graph.is_terminal():
            return TransitionResult.rejected(current, "only the final step can be submitted")
        self._graph.complete(current)
        self._state.finished = True
        await self._store.clear()
        logger.info(f"Shipment session {self.session_id} finished")
        return TransitionResult.ok(current)

    def _enter(self, step_id: int) -> None:
        """Seed the draft of the step just entered from artifacts and order data."""
        previous = step_id - 1
        if self._graph.is_completed(previous):
            draft = self._state.step_drafts.get(step_id, {})
            self._state.step_drafts[step_id] = self._bridge.seed(
                previous,
                self._state.carried_artifacts,
                draft,
                self.tracker(step_id),
            )
        self._populate_from_order(step_id)

    def _populate_from_order(self, step_id: int) -> Dict[str, Any]:
        rules = self._rules.get(step_id)
        if not rules or not self._state.order_data:
            return {}
        draft = self._state.step_drafts.get(step_id, {})
        patch = self._resolver.apply(
            self._state.order_data, draft, rules, self.tracker(step_id)
        )
        if patch:
            self._state.step_drafts[step_id] = apply_patch(draft, patch)
        return patch

    def _log_transition(self, action: str, result: TransitionResult) -> None:
        if result.outcome is Outcome.OK:
            logger.info(f"Workflow {action}: now at step {result.step_id}")
        else:
            logger.info(f"Workflow {action} {result.outcome.value}: {result.reason}")

    # ------------------------------------------------------------------
    # Authentication interruption
    async def authentication_lost(self) -> TransitionResult:
        """Snapshot the workflow and suspend it until the user logs in again."""
        current = self.current_step_id
        if self._abandoned:
            return TransitionResult.rejected(current, "abandoned")
        if self._pending is not None:
            return TransitionResult.rejected(current, "busy")
        if self._suspended:
            return TransitionResult.noop(current, "already suspended")

        self._suspended = True
        self._pending = "save"
        session = self.session_id
        snapshot = self._state.model_copy(deep=True)
        try:
            saved = await self._store.save(snapshot)
        finally:
            if session == self.session_id:
                self._pending = None

        if session != self.session_id:
            logger.info("Discarding draft save result from an abandoned session")
            return TransitionResult.noop(current, "session changed")
        logger.info(f"Workflow suspended at step {current} pending re-authentication")
        if not saved:
            return TransitionResult(
                outcome=Outcome.OK, step_id=current, reason="draft not saved"
            )
        return TransitionResult.ok(current)

    async def authentication_recovered(self) -> TransitionResult:
        """Resume, replacing the state with a saved snapshot if one exists."""
        current = self.current_step_id
        if self._abandoned:
            return TransitionResult.rejected(current, "abandoned")
        if self._pending is not None:
            return TransitionResult.rejected(current, "busy")

        self._pending = "restore"
        session = self.session_id
        try:
            restored = await self._store.restore()
        finally:
            if session == self.session_id:
                self._pending = None

        if session != self.session_id:
            logger.info("Discarding draft restore result from an abandoned session")
            return TransitionResult.noop(current, "session changed")

        if (
            restored is not None
            and not self._resume_any_shipment
            and restored.shipment_id != self._state.shipment_id
        ):
            logger.info(
                f"Discarding draft of shipment {restored.shipment_id}; "
                f"shipment {self._state.shipment_id} is in progress"
            )
            restored = None

        was_suspended = self._suspended
        self._suspended = False
        if restored is None:
            if was_suspended:
                logger.info("Workflow resumed with in-memory state")
            return TransitionResult.noop(current, "nothing to resume")

        self._replace_state(restored)
        self._resume_any_shipment = False
        logger.info(f"Workflow resumed from draft at step {restored.current_step_id}")
        return TransitionResult.ok(restored.current_step_id)

    async def check_authentication(
        self, tokens: TokenAccessor, carrier_id: str
    ) -> TransitionResult:
        """Refresh an expired carrier token and react to the result."""
        current = self.current_step_id
        if not tokens.is_session_active():
            return TransitionResult.noop(current, "session inactive")
        if tokens.is_expired(carrier_id, self._grace_seconds):
            session = self.session_id
            refreshed = await tokens.refresh(carrier_id)
            if session != self.session_id:
                logger.info(f"Dropping {carrier_id} token refresh from an abandoned session")
                return TransitionResult.noop(current, "session changed")
            if not refreshed:
                logger.warning(f"Authentication lost for {carrier_id}")
                return await self.authentication_lost()
        return await self.authentication_recovered()

    async def check_carriers(
        self, tokens: TokenAccessor, carrier_ids: Optional[Iterable[str]] = None
    ) -> List[TransitionResult]:
        """Run :meth:`check_authentication` for each carrier, stopping on suspension.

        Without ``carrier_ids`` the carriers from the ``auth`` config are checked.
        """
        results = []
        for carrier_id in self._carriers if carrier_ids is None else carrier_ids:
            result = await self.check_authentication(tokens, carrier_id)
            results.append(result)
            if self._suspended:
                break
        return results
