# actions.py
"""Form actions behind the invoice dashboard.

Each invoice action takes the previously returned ``State`` (unused, kept so
every action has the same ``(prev_state, form) -> State`` shape for forms that
resubmit) plus the raw form, and always answers with a ``State``; validation
and storage failures come back as messages instead of exceptions.
"""
import functools
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional

from sqlalchemy import delete, func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from auth import AuthError, CREDENTIALS_SIGNIN
from models import Invoice
from revalidate import INVOICES_PATH
from validation import (
  CreateInvoiceFields,
  InvoiceFields,
  State,
  UpdateInvoiceFields,
  normalize_invoice_form,
  to_cents,
  validate_invoice_fields,
)

logger = logging.getLogger(__name__)

FormAction = Callable[[Optional[State], Mapping[str, Any]], State]

SIGN_IN_SUCCESS = "Success"

def authenticate(
  prev_state: Optional[str],
  credentials: Mapping[str, Any],
  sign_in: Callable[[Mapping[str, Any]], Any],
) -> str:
  try:
    sign_in(credentials)
    return SIGN_IN_SUCCESS
  except AuthError as error:
    if error.type == CREDENTIALS_SIGNIN:
      return "Invalid credentials."
    logger.error("sign-in failed: %s", error.type)
    return "Something went wrong."

def driver_message(exc: SQLAlchemyError) -> str:
  orig = getattr(exc, "orig", None)
  return str(orig) if orig is not None else str(exc)

def invoice_params(data: InvoiceFields) -> Dict[str, Any]:
  # the storage driver gets None, never a missing value
  amount = getattr(data, "amount", None)
  return {
    "customer_id": getattr(data, "customer_id", None),
    "amount": to_cents(amount) if amount is not None else None,
    "status": getattr(data, "status", None),
  }

def build_update_statement(invoice_id: str, params: Mapping[str, Any]):
  """UPDATE that only overwrites columns whose new value is not NULL."""
  return (
    update(Invoice)
    .where(Invoice.id == invoice_id)
    .values(
      customer_id=func.coalesce(params.get("customer_id"), Invoice.customer_id),
      amount=func.coalesce(params.get("amount"), Invoice.amount),
      status=func.coalesce(params.get("status"), Invoice.status),
    )
    .execution_options(synchronize_session=False)
  )

class InvoiceActions:
  def __init__(self, session: Session, invalidate: Callable[[str], None]):
    self.session = session
    self.invalidate = invalidate

  def create_invoice(self, prev_state: Optional[State], form: Mapping[str, Any]) -> State:
    validated = validate_invoice_fields(normalize_invoice_form(form), CreateInvoiceFields)
    if not validated.success:
      return State(errors=validated.errors, message="Missing Fields. Failed to Create Invoice.")

    params = invoice_params(validated.data)
    try:
      invoice = Invoice(**params, date=datetime.now(timezone.utc))
      invoice_id = invoice.id
      self.session.add(invoice)
      self.session.commit()
    except SQLAlchemyError as e:
      self.session.rollback()
      logger.warning("create invoice failed: %s", e)
      return State(message=f"Error creating invoice: {driver_message(e)}")

    logger.info("created invoice %s for customer %s", invoice_id, params["customer_id"])
    self.invalidate(INVOICES_PATH)
    return State(message="Invoice created successfully")

  def update_invoice(
    self, invoice_id: str, prev_state: Optional[State], form: Mapping[str, Any],
  ) -> State:
    if not invoice_id:
      return State(message="Invoice ID is required.")

    validated = validate_invoice_fields(normalize_invoice_form(form), UpdateInvoiceFields)
    if not validated.success:
      return State(errors=validated.errors, message="Missing fields. Failed to update invoice.")

    try:
      result = self.session.exec(build_update_statement(invoice_id, invoice_params(validated.data)))
      self.session.commit()
    except SQLAlchemyError as e:
      self.session.rollback()
      logger.warning("update invoice %s failed: %s", invoice_id, e)
      return State(message=f"Error updating invoice: {driver_message(e)}")

    if not result.rowcount:
      logger.warning("update matched no invoice with id %s", invoice_id)
    self.invalidate(INVOICES_PATH)
    return State(message="Invoice updated successfully")

  def delete_invoice(self, invoice_id: str) -> State:
    if not invoice_id:
      return State(message="Invoice ID is required.")

    try:
      self.session.exec(delete(Invoice).where(Invoice.id == invoice_id))
      self.session.commit()
    except SQLAlchemyError as e:
      self.session.rollback()
      logger.warning("delete invoice %s failed: %s", invoice_id, e)
      return State(message=f"Error deleting invoice: {driver_message(e)}")

    logger.info("deleted invoice %s", invoice_id)
    self.invalidate(INVOICES_PATH)
    return State(message="Invoice deleted successfully")

def bind_invoice_id(actions: InvoiceActions, invoice_id: str) -> FormAction:
  return functools.partial(actions.update_invoice, invoice_id)
