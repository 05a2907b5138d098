"""Carry-forward bridge tests."""

from freightflow.carry_forward import CarryForwardBridge, CarryRule, extract_reference_number
from freightflow.contracts import ArtifactKind
from freightflow.steps import blank_draft
from freightflow.tracking import FieldEditTracker

QUOTE = {
    "quote": {"quoteNumber": "Q-100", "totalCharge": 412.0},
    "formData": {
        "paymentTermCd": "P",
        "shipmentDate": "2024-05-01T12:00",
        "destinationCity": "Reno",
        "shipperPostalCd": "30301",
        "consigneePostalCd": "89501",
        "commodities": [{"pieceCnt": 2, "grossWeight": {"weight": 450.0}}],
    },
}

BOL_FORM = {
    "shipDate": "2024-05-01T12:00",
    "shipper": {
        "address": {"addressLine1": "9 Dock Rd", "cityName": "Atlanta", "postalCd": "30301"},
        "contactInfo": {
            "companyName": "Warehouse Co",
            "email": {"emailAddr": "dock@wh.test"},
            "phone": {"phoneNbr": "404-555-0100"},
        },
    },
    "commodityLine": [{"pieceCnt": 2, "grossWeight": {"weight": 450.0}, "nmfcClass": "70"}],
}


def test_quote_seeds_bill_of_lading_draft():
    bridge = CarryForwardBridge()
    artifacts = {ArtifactKind.SELECTED_QUOTE.value: QUOTE}

    draft = bridge.seed(1, artifacts, blank_draft(2), FieldEditTracker())

    assert draft["quoteNumber"] == "Q-100"
    assert draft["destinationCity"] == "Reno"
    assert draft["paymentTermCd"] == "P"
    assert draft["shipDate"] == "2024-05-01T12:00"
    assert draft["shipper"]["address"]["postalCd"] == "30301"
    assert draft["consignee"]["address"]["postalCd"] == "89501"
    assert draft["commodityLine"] == QUOTE["formData"]["commodities"]


def test_carried_values_respect_edits_and_existing_values():
    bridge = CarryForwardBridge()
    tracker = FieldEditTracker()
    tracker.mark_edited("destinationCity")
    next_draft = blank_draft(2)
    next_draft["paymentTermCd"] = "C"

    draft = bridge.seed(
        1, {ArtifactKind.SELECTED_QUOTE.value: QUOTE}, next_draft, tracker
    )

    assert draft["destinationCity"] == ""
    assert draft["paymentTermCd"] == "C"
    assert draft["quoteNumber"] == "Q-100"


def test_edited_parent_blocks_carried_children():
    tracker = FieldEditTracker()
    tracker.mark_edited("shipper")

    draft = CarryForwardBridge().seed(
        1, {ArtifactKind.SELECTED_QUOTE.value: QUOTE}, blank_draft(2), tracker
    )

    assert draft["shipper"]["address"]["postalCd"] == ""
    assert draft["consignee"]["address"]["postalCd"] == "89501"


def test_artifacts_are_not_mutated():
    bridge = CarryForwardBridge()
    artifacts = {ArtifactKind.SELECTED_QUOTE.value: QUOTE}

    draft = bridge.seed(1, artifacts, blank_draft(2), FieldEditTracker())
    draft["commodityLine"][0]["pieceCnt"] = 99

    assert QUOTE["formData"]["commodities"][0]["pieceCnt"] == 2


def test_bill_of_lading_seeds_pickup_draft():
    artifacts = {
        ArtifactKind.BILL_OF_LADING_FORM.value: BOL_FORM,
        ArtifactKind.GENERATED_REFERENCE_NUMBER.value: "PRO-555",
    }
    draft = CarryForwardBridge().seed(2, artifacts, blank_draft(3), FieldEditTracker())

    assert draft["proNbr"] == "PRO-555"
    assert draft["pkupDate"] == "2024-05-01"
    assert draft["shipper"]["address"]["cityName"] == "Atlanta"
    assert draft["requestor"]["companyName"] == "Warehouse Co"
    assert draft["contact"]["phone"] == "404-555-0100"
    assert draft["items"] == [{"pieceCnt": 2, "weight": 450.0, "nmfcClass": "70"}]


def test_pickup_seeds_summary_with_every_response():
    artifacts = {
        ArtifactKind.SELECTED_QUOTE.value: QUOTE,
        ArtifactKind.GENERATED_DOCUMENT_RESPONSE.value: {"data": {"bolId": "B1"}},
        ArtifactKind.GENERATED_REFERENCE_NUMBER.value: "PRO-555",
        ArtifactKind.PICKUP_RESPONSE.value: {"data": {"confirmationNbr": "PK-9"}},
    }
    draft = CarryForwardBridge().seed(3, artifacts, blank_draft(4), FieldEditTracker())

    assert draft == {
        "rateQuote": QUOTE["quote"],
        "billOfLading": {"bolId": "B1"},
        "referenceNumber": "PRO-555",
        "pickup": {"confirmationNbr": "PK-9"},
    }


def test_custom_rules_and_unknown_step():
    bridge = CarryForwardBridge(
        {1: [CarryRule(ArtifactKind.SELECTED_QUOTE, "quote.totalCharge", "charge", str)]}
    )
    artifacts = {ArtifactKind.SELECTED_QUOTE.value: QUOTE}

    assert bridge.seed(1, artifacts, {"charge": ""}, FieldEditTracker()) == {"charge": "412.0"}
    assert bridge.seed(2, artifacts, {"charge": ""}, FieldEditTracker()) == {"charge": ""}


def test_extract_reference_number():
    assert extract_reference_number({"data": {"referenceNumbers": {"pro": "123"}}}) == "123"
    assert extract_reference_number({"data": {}}) is None
    assert extract_reference_number(None) is None
