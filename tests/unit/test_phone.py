"""
Unit tests for M-Pesa phone number helpers
"""

import pytest

from app.services.phone import format_kenyan_mobile, is_valid_kenyan_mobile, normalize_phone


@pytest.mark.unit
@pytest.mark.parametrize("raw,expected", [
    ("0712345678", "254712345678"),
    ("712345678", "254712345678"),
    ("254712345678", "254712345678"),
    ("+254 712 345 678", "254712345678"),
    ("0110-123-456", "254110123456"),
])
def test_normalize_phone(raw, expected):
    assert normalize_phone(raw) == expected


@pytest.mark.unit
@pytest.mark.parametrize("phone", ["0712345678", "+254712345678", "254112345678", "712345678"])
def test_valid_kenyan_mobiles(phone):
    assert is_valid_kenyan_mobile(phone)


@pytest.mark.unit
@pytest.mark.parametrize("phone", ["", "0812345678", "07123456", "2547123456789", "phone", "0712 345 678"])
def test_invalid_kenyan_mobiles(phone):
    assert not is_valid_kenyan_mobile(phone)


@pytest.mark.unit
def test_format_kenyan_mobile():
    assert format_kenyan_mobile("0712345678") == "254712345678"
    assert format_kenyan_mobile("+254112345678") == "254112345678"
    with pytest.raises(ValueError):
        format_kenyan_mobile("12345")
