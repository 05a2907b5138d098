"""Seed a step's draft from the artifacts earlier steps produced."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .autopopulate.resolver import can_populate
from .constants import BILL_OF_LADING, PICKUP_REQUEST, RATE_QUOTE
from .contracts import ArtifactKind
from .paths import apply_patch, get_path, is_empty
from .tracking import FieldEditTracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CarryRule:
    """Copy ``source_path`` of one artifact into ``target_field`` of the next draft."""

    artifact_kind: ArtifactKind
    source_path: str
    target_field: str
    transform: Optional[Callable[[Any], Any]] = None


def extract_reference_number(document_response: Any) -> Optional[str]:
    """Pull the PRO number out of a bill of lading response, if present."""
    for path in ("data.referenceNumbers.pro", "referenceNumbers.pro", "data.proNbr"):
        value = get_path(document_response, path)
        if not is_empty(value):
            return str(value)
    return None


def _pickup_items(commodity_lines: Any) -> List[Dict[str, Any]]:
    if not isinstance(commodity_lines, list):
        return []
    items = []
    for line in commodity_lines:
        if not isinstance(line, Mapping):
            continue
        items.append(
            {
                "pieceCnt": line.get("pieceCnt"),
                "weight": get_path(line, "grossWeight.weight"),
                "nmfcClass": line.get("nmfcClass", ""),
            }
        )
    return items


def _pickup_date(ship_date: Any) -> str:
    text = str(ship_date)
    return text.split("T", 1)[0] if "T" in text else text


_QUOTE = ArtifactKind.SELECTED_QUOTE
_BOL_FORM = ArtifactKind.BILL_OF_LADING_FORM
_BOL_RESPONSE = ArtifactKind.GENERATED_DOCUMENT_RESPONSE
_REFERENCE = ArtifactKind.GENERATED_REFERENCE_NUMBER
_PICKUP = ArtifactKind.PICKUP_RESPONSE

DEFAULT_CARRY_RULES: Dict[int, List[CarryRule]] = {
    RATE_QUOTE: [
        CarryRule(_QUOTE, "quote.quoteNumber", "quoteNumber"),
        CarryRule(_QUOTE, "formData.paymentTermCd", "paymentTermCd"),
        CarryRule(_QUOTE, "formData.shipmentDate", "shipDate"),
        CarryRule(_QUOTE, "formData.destinationCity", "destinationCity"),
        CarryRule(_QUOTE, "formData.shipperPostalCd", "shipper.address.postalCd"),
        CarryRule(_QUOTE, "formData.consigneePostalCd", "consignee.address.postalCd"),
        CarryRule(_QUOTE, "formData.commodities", "commodityLine"),
    ],
    BILL_OF_LADING: [
        CarryRule(_REFERENCE, "", "proNbr"),
        CarryRule(_BOL_FORM, "shipDate", "pkupDate", _pickup_date),
        *[
            CarryRule(_BOL_FORM, f"shipper.{path}", f"shipper.{path}")
            for path in (
                "address.addressLine1",
                "address.cityName",
                "address.stateCd",
                "address.countryCd",
                "address.postalCd",
                "contactInfo.companyName",
                "contactInfo.email.emailAddr",
                "contactInfo.phone.phoneNbr",
            )
        ],
        CarryRule(_BOL_FORM, "shipper.contactInfo.companyName", "requestor.companyName"),
        CarryRule(_BOL_FORM, "shipper.contactInfo.companyName", "requestor.fullName"),
        CarryRule(_BOL_FORM, "shipper.contactInfo.email.emailAddr", "requestor.email"),
        CarryRule(_BOL_FORM, "shipper.contactInfo.phone.phoneNbr", "requestor.phone"),
        CarryRule(_BOL_FORM, "shipper.contactInfo.companyName", "contact.companyName"),
        CarryRule(_BOL_FORM, "shipper.contactInfo.companyName", "contact.fullName"),
        CarryRule(_BOL_FORM, "shipper.contactInfo.email.emailAddr", "contact.email"),
        CarryRule(_BOL_FORM, "shipper.contactInfo.phone.phoneNbr", "contact.phone"),
        CarryRule(_BOL_FORM, "commodityLine", "items", _pickup_items),
    ],
    PICKUP_REQUEST: [
        CarryRule(_QUOTE, "quote", "rateQuote"),
        CarryRule(_BOL_RESPONSE, "data", "billOfLading"),
        CarryRule(_REFERENCE, "", "referenceNumber"),
        CarryRule(_PICKUP, "data", "pickup"),
    ],
}


class CarryForwardBridge:
    """Copies fixed artifact fields into the draft of the step being entered.

    Rules are grouped by the step whose completion triggers them. A rule may
    read any artifact available so far, but it only writes through the same
    empty and not-edited gate the order-data resolver uses.
    """

    def __init__(self, rules: Optional[Mapping[int, Sequence[CarryRule]]] = None) -> None:
        self._rules = dict(DEFAULT_CARRY_RULES if rules is None else rules)

    def rules_for(self, completed_step_id: int) -> Sequence[CarryRule]:
        return self._rules.get(completed_step_id, ())

    def patch(
        self,
        completed_step_id: int,
        artifacts: Mapping[str, Any],
        next_draft: Mapping[str, Any],
        tracker: FieldEditTracker,
    ) -> Dict[str, Any]:
        patch: Dict[str, Any] = {}
        for rule in self.rules_for(completed_step_id):
            if rule.target_field in patch:
                continue
            if not can_populate(next_draft, rule.target_field, tracker):
                continue
            artifact = artifacts.get(rule.artifact_kind.value)
            if artifact is None:
                continue
            value = copy.deepcopy(
                get_path(artifact, rule.source_path) if rule.source_path else artifact
            )
            if rule.transform is not None and not is_empty(value):
                value = rule.transform(value)
            if is_empty(value):
                continue
            patch[rule.target_field] = value
        return patch

    def seed(
        self,
        completed_step_id: int,
        artifacts: Mapping[str, Any],
        next_draft: Mapping[str, Any],
        tracker: FieldEditTracker,
    ) -> Dict[str, Any]:
        """Return ``next_draft`` with carried-forward values filled in."""
        patch = self.patch(completed_step_id, artifacts, next_draft, tracker)
        if patch:
            logger.info(
                f"Carried {len(patch)} field(s) forward from step {completed_step_id}"
            )
        return apply_patch(next_draft, patch)
