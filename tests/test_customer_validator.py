"""
客户信息校验测试。
"""
from dataclasses import replace

import pytest

from orders.domain import CustomerValidator
from orders.domain.exceptions import InvalidOrderException, OrderErrorKind


@pytest.fixture
def validator():
    return CustomerValidator()


def test_valid_customer_passes(validator, customer):
    validator.validate(customer)


def test_missing_customer_is_rejected(validator):
    with pytest.raises(InvalidOrderException) as exc_info:
        validator.validate(None)
    
    assert exc_info.value.field_name == "customer"
    assert exc_info.value.kind is OrderErrorKind.INVALID


@pytest.mark.parametrize("full_name", ["", "   ", "Al"])
def test_short_name_is_rejected(validator, customer, full_name):
    with pytest.raises(InvalidOrderException) as exc_info:
        validator.validate(replace(customer, full_name=full_name))
    
    assert exc_info.value.field_name == "customer.full_name"


@pytest.mark.parametrize("email", ["", "ana", "ana@", "ana@example", "ana example@x.com"])
def test_malformed_email_is_rejected(validator, customer, email):
    with pytest.raises(InvalidOrderException) as exc_info:
        validator.validate(replace(customer, email=email))
    
    assert exc_info.value.field_name == "customer.email"


def test_blank_phone_is_rejected(validator, customer):
    with pytest.raises(InvalidOrderException) as exc_info:
        validator.validate(replace(customer, phone=" "))
    
    assert exc_info.value.field_name == "customer.phone"


def test_missing_address_is_rejected(validator, customer):
    with pytest.raises(InvalidOrderException) as exc_info:
        validator.validate(replace(customer, address=None))
    
    assert exc_info.value.field_name == "customer.address"


@pytest.mark.parametrize("postal_code", ["", "2801", "280134", "28O13"])
def test_postal_code_must_have_five_digits(validator, address, postal_code):
    with pytest.raises(InvalidOrderException) as exc_info:
        validator.validate_address(replace(address, postal_code=postal_code))
    
    assert exc_info.value.field_name == "customer.address.postal_code"


@pytest.mark.parametrize("field_name", ["street", "city", "province", "country"])
def test_short_address_fields_are_rejected(validator, address, field_name):
    with pytest.raises(InvalidOrderException) as exc_info:
        validator.validate_address(replace(address, **{field_name: "ab"}))
    
    assert exc_info.value.field_name == f"customer.address.{field_name}"
