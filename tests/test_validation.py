"""Tests for the invoice form schema: pure validation, no IO."""

import pytest

from validation import (
  CreateInvoiceFields,
  FIELD_MESSAGES,
  MAX_AMOUNT_CENTS,
  State,
  UpdateInvoiceFields,
  from_cents,
  normalize_invoice_form,
  to_cents,
  validate_invoice_fields,
)

VALID = {"customerId": "cust-1", "amount": "49.99", "status": "paid"}


def test_valid_form_is_coerced():
  result = validate_invoice_fields(VALID, CreateInvoiceFields)
  assert result.success
  assert result.errors is None
  assert result.data.customer_id == "cust-1"
  assert result.data.amount == 49.99
  assert isinstance(result.data.amount, float)
  assert result.data.status == "paid"


@pytest.mark.parametrize("amount", ["0", "-5", "-0.01", "abc", "", "0.001", "nan", "inf", "1e20", "21474836.48"])
def test_non_positive_or_unparseable_amount_rejected(amount):
  result = validate_invoice_fields({**VALID, "amount": amount}, CreateInvoiceFields)
  assert not result.success
  assert result.errors == {"amount": [FIELD_MESSAGES["amount"]]}


def test_half_cent_rounds_up_to_a_valid_amount():
  result = validate_invoice_fields({**VALID, "amount": "0.005"}, CreateInvoiceFields)
  assert result.success


@pytest.mark.parametrize("status", ["Paid", "overdue", "", " pending"])
def test_status_must_match_exactly(status):
  result = validate_invoice_fields({**VALID, "status": status}, UpdateInvoiceFields)
  assert result.errors == {"status": ["Please select an invoice status."]}


@pytest.mark.parametrize("customer_id", [None, ""])
def test_missing_customer_rejected(customer_id):
  raw = {k: v for k, v in VALID.items() if k != "customerId"}
  if customer_id is not None:
    raw["customerId"] = customer_id
  result = validate_invoice_fields(raw, CreateInvoiceFields)
  assert result.errors == {"customerId": ["Please select a customer."]}


def test_all_violations_collected():
  result = validate_invoice_fields({}, CreateInvoiceFields)
  assert set(result.errors) == {"customerId", "amount", "status"}
  assert all(len(messages) == 1 for messages in result.errors.values())


def test_fields_without_violations_absent_from_errors():
  result = validate_invoice_fields({**VALID, "status": "draft"})
  assert "customerId" not in result.errors
  assert "amount" not in result.errors


def test_normalize_skips_absent_and_keeps_present_verbatim():
  form = {"customerId": " cust-1 ", "amount": 12.5, "status": None, "id": "ignored"}
  assert normalize_invoice_form(form) == {"customerId": " cust-1 ", "amount": "12.5"}


def test_normalized_status_with_padding_is_rejected():
  raw = normalize_invoice_form({**VALID, "status": " pending "})
  result = validate_invoice_fields(raw, CreateInvoiceFields)
  assert result.errors == {"status": ["Please select an invoice status."]}


def test_largest_storable_amount_is_valid():
  result = validate_invoice_fields({**VALID, "amount": "21474836.47"}, CreateInvoiceFields)
  assert result.success
  assert to_cents(result.data.amount) == MAX_AMOUNT_CENTS


def test_normalize_empty_form():
  assert normalize_invoice_form({}) == {}


def test_cents_conversion_rounds_half_up():
  assert to_cents(49.99) == 4999
  assert to_cents(0.1) == 10
  assert to_cents(1.005) == 101
  assert from_cents(4999) == 49.99


def test_state_serializes_without_absent_keys():
  assert State(message="ok").model_dump(exclude_none=True) == {"message": "ok"}
