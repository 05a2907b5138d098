"""Value transform tests."""

from freightflow.autopopulate import transforms


def test_extract_zip():
    assert transforms.extract_zip("89501-1234") == "89501"
    assert transforms.extract_zip("NV 8 9 5 0 1") == "89501"
    assert transforms.extract_zip(89501) == "89501"
    assert transforms.extract_zip("123") == ""


def test_country_code_and_name():
    assert transforms.country_code("USA") == "US"
    assert transforms.country_code("canada") == "CA"
    assert transforms.country_code("Germany") == "GE"
    assert transforms.country_name("MX") == "Mexico"
    assert transforms.country_name("United States of America") == "United States"


def test_payment_term_code():
    assert transforms.payment_term_code("Prepaid") == "P"
    assert transforms.payment_term_code("collect") == "C"
    assert transforms.payment_term_code("Third Party") == "3"
    assert transforms.payment_term_code("card") == ""


def test_positive_numbers():
    assert transforms.to_positive_int("3") == 3
    assert transforms.to_positive_int("2.9") == 2
    assert transforms.to_positive_int("0") is None
    assert transforms.to_positive_float("1,250.5") == 1250.5
    assert transforms.to_positive_float("heavy") is None
