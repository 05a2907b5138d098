"""Default auto-population rules keyed by the step whose draft they fill.

Candidate keys follow the spellings marketplace exports actually use; key
matching is case and punctuation insensitive so only distinct wordings are
listed.
"""

from __future__ import annotations

from typing import Dict, List

from ..constants import BILL_OF_LADING, RATE_QUOTE
from . import transforms
from .resolver import AutoPopulationRule

SHIP_TO_ZIP_KEYS = (
    "Customer Zip Code",
    "Customer Postal Code",
    "Customer Shipping Zip Code",
    "Customer Shipping Postal Code",
    "Ship to Zip Code",
    "Ship to Postal Code",
    "Shipping Zip Code",
    "Shipping Postal Code",
    "Destination Zip Code",
    "Destination Postal Code",
    "Bill to Zip Code",
    "Bill to Postal Code",
    "Zip",
    "Postal Code",
    "Zip Code",
)
ZIP_KEYWORDS = ("zip", "postal", "postcode")

SHIP_FROM_ZIP_KEYS = (
    "Ship from Zip Code",
    "Ship from Postal Code",
    "Origin Zip Code",
    "Origin Postal Code",
    "Warehouse Zip Code",
    "Warehouse Postal Code",
)

SHIP_TO_ADDRESS_KEYS = (
    "Customer Address",
    "Customer Address 1",
    "Ship to Address 1",
    "Shipping Address",
    "Customer Shipping Address",
    "Ship To Address",
)

SHIP_TO_CITY_KEYS = (
    "Customer City",
    "Ship to City",
    "Shipping City",
    "Customer Shipping City",
)

SHIP_TO_STATE_KEYS = (
    "Customer State",
    "Customer State/Province",
    "Ship to State",
    "Ship to State/Province",
    "Shipping State",
    "Shipping State/Province",
)

SHIP_TO_COUNTRY_KEYS = ("Customer Country", "Ship to Country", "Shipping Country")

CUSTOMER_NAME_KEYS = ("Customer Name", "Company Name", "Ship to Name", "Shipping Name")

CUSTOMER_EMAIL_KEYS = (
    "Customer Email",
    "Customer Email Address",
    "Email",
    "Ship to Email",
    "Shipping Email",
)

CUSTOMER_PHONE_KEYS = (
    "Customer Phone Number",
    "Customer Phone",
    "Phone",
    "Phone Number",
    "Ship to Phone",
    "Shipping Phone",
)

WEIGHT_KEYS = ("Weight", "Total Weight", "Shipping Weight", "Item Weight")
QUANTITY_KEYS = ("Quantity", "Qty", "Piece Count", "Items")
FREIGHT_CLASS_KEYS = ("NMFC Class", "NMFC", "Freight Class", "Class")
PAYMENT_TERM_KEYS = (
    "Payment Terms",
    "Terms",
    "Payment Term",
    "Payment Terms Code",
    "Payment Method",
)


def _zip_rule(target: str, keys=SHIP_TO_ZIP_KEYS, scan: bool = True) -> AutoPopulationRule:
    return AutoPopulationRule(
        target,
        keys,
        transform=transforms.extract_zip,
        fallback_keywords=ZIP_KEYWORDS if scan else (),
    )


RATE_QUOTE_RULES: List[AutoPopulationRule] = [
    _zip_rule("consigneePostalCd"),
    _zip_rule("deliveryPostalCode"),
    _zip_rule("shipperPostalCd", SHIP_FROM_ZIP_KEYS, scan=False),
    AutoPopulationRule(
        "deliveryCountry", SHIP_TO_COUNTRY_KEYS, transform=transforms.country_name
    ),
    AutoPopulationRule(
        "paymentTermCd", PAYMENT_TERM_KEYS, transform=transforms.payment_term_code
    ),
    AutoPopulationRule(
        "commodities.0.pieceCnt", QUANTITY_KEYS, transform=transforms.to_positive_int
    ),
    AutoPopulationRule(
        "commodities.0.grossWeight.weight",
        WEIGHT_KEYS,
        transform=transforms.to_positive_float,
    ),
    AutoPopulationRule(
        "commodities.0.dimensions.length",
        ("Length", "Package Length"),
        transform=transforms.to_positive_float,
    ),
    AutoPopulationRule(
        "commodities.0.dimensions.width",
        ("Width", "Package Width"),
        transform=transforms.to_positive_float,
    ),
    AutoPopulationRule(
        "commodities.0.dimensions.height",
        ("Height", "Package Height"),
        transform=transforms.to_positive_float,
    ),
    AutoPopulationRule(
        "commodities.0.nmfcClass", FREIGHT_CLASS_KEYS, transform=transforms.strip
    ),
]

BILL_OF_LADING_RULES: List[AutoPopulationRule] = [
    AutoPopulationRule(
        "consignee.address.addressLine1", SHIP_TO_ADDRESS_KEYS, transform=transforms.strip
    ),
    AutoPopulationRule(
        "consignee.address.cityName", SHIP_TO_CITY_KEYS, transform=transforms.strip
    ),
    AutoPopulationRule(
        "consignee.address.stateCd", SHIP_TO_STATE_KEYS, transform=transforms.strip
    ),
    AutoPopulationRule(
        "consignee.address.countryCd",
        SHIP_TO_COUNTRY_KEYS,
        transform=transforms.country_code,
    ),
    _zip_rule("consignee.address.postalCd"),
    AutoPopulationRule(
        "consignee.contactInfo.companyName",
        CUSTOMER_NAME_KEYS,
        transform=transforms.strip,
    ),
    AutoPopulationRule(
        "consignee.contactInfo.email.emailAddr",
        CUSTOMER_EMAIL_KEYS,
        transform=transforms.strip,
    ),
    AutoPopulationRule(
        "consignee.contactInfo.phone.phoneNbr",
        CUSTOMER_PHONE_KEYS,
        transform=transforms.strip,
    ),
]

DEFAULT_RULES: Dict[int, List[AutoPopulationRule]] = {
    RATE_QUOTE: RATE_QUOTE_RULES,
    BILL_OF_LADING: BILL_OF_LADING_RULES,
}
