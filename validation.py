# validation.py
"""Invoice form schema and the result shapes the form actions hand back.

Form fields arrive under their HTML names (``customerId``, ``amount``,
``status``). Every failing field reports a single user-facing message taken
from ``FIELD_MESSAGES``, so callers can render inline errors per field.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Literal, Mapping, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

INVOICE_FIELDS = ("customerId", "amount", "status")
INVOICE_STATUSES = ("pending", "paid")

FIELD_MESSAGES = {
  "customerId": "Please select a customer.",
  "amount": "Please enter an amount greater than $0.",
  "status": "Please select an invoice status.",
}

# invoices.amount is a 32-bit INTEGER of cents
MAX_AMOUNT_CENTS = 2_147_483_647

def to_cents(amount: float) -> int:
  return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

def from_cents(cents: int) -> float:
  return float(Decimal(cents) / 100)

class InvoiceFields(BaseModel):
  model_config = ConfigDict(populate_by_name=True)

  customer_id: str = Field(alias="customerId", min_length=1)
  amount: float = Field(gt=0, allow_inf_nan=False)
  status: Literal["pending", "paid"]

  @field_validator("amount")
  @classmethod
  def fits_in_cents(cls, v: float) -> float:
    if not 1 <= to_cents(v) <= MAX_AMOUNT_CENTS:
      raise ValueError("amount out of range once stored in cents")
    return v

class InvoiceSchema(InvoiceFields):
  id: str
  date: datetime

# Both actions omit id and date: storage assigns them on create, and on
# update the id comes from the route while the date never changes.
class CreateInvoiceFields(InvoiceFields):
  pass

class UpdateInvoiceFields(InvoiceFields):
  pass

class State(BaseModel):
  errors: Optional[Dict[str, List[str]]] = None
  message: Optional[str] = None

@dataclass
class ValidationResult:
  data: Optional[InvoiceFields] = None
  errors: Optional[Dict[str, List[str]]] = None

  @property
  def success(self) -> bool:
    return self.errors is None

def normalize_invoice_form(form: Mapping[str, Any]) -> Dict[str, str]:
  """Pull the invoice fields out of a submitted form.

  Absent fields are left out rather than defaulted; present ones become
  plain strings, unchanged, and are coerced by the schema.
  """
  raw: Dict[str, str] = {}
  for name in INVOICE_FIELDS:
    value = form.get(name)
    if value is None:
      continue
    raw[name] = str(value)
  return raw

def collect_field_errors(exc: ValidationError) -> Dict[str, List[str]]:
  errors: Dict[str, List[str]] = {}
  for err in exc.errors():
    field = str(err["loc"][0]) if err["loc"] else "form"
    message = FIELD_MESSAGES.get(field, err["msg"])
    messages = errors.setdefault(field, [])
    if message not in messages:
      messages.append(message)
  return errors

def validate_invoice_fields(
  raw: Mapping[str, Any],
  schema: Type[InvoiceFields] = InvoiceFields,
) -> ValidationResult:
  try:
    data = schema.model_validate(raw)
  except ValidationError as exc:
    return ValidationResult(errors=collect_field_errors(exc))
  return ValidationResult(data=data)
