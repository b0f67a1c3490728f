# billing_route.py
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, Form, HTTPException
from sqlmodel import Session, col, select

from actions import InvoiceActions, bind_invoice_id
from auth import AuthSession, hash_password, require_session
from db import get_session
from models import Customer, Invoice, User
from revalidate import INVOICES_PATH, ViewCache, get_view_cache
from validation import InvoiceSchema, from_cents

router = APIRouter(prefix="/dashboard", tags=["billing"], dependencies=[Depends(require_session)])
seed_router = APIRouter(tags=["billing"])

NAV_LINKS = [
  {"name": "Home", "href": "/dashboard"},
  {"name": "Invoices", "href": "/dashboard/invoices"},
  {"name": "Customers", "href": "/dashboard/customers"},
]

class InvoiceRow(InvoiceSchema):
  name: str
  email: str

def _match(q: str, *values: str) -> bool:
  ql = q.strip().lower()
  return any(ql in (v or "").lower() for v in values)

def invoice_form(
  customerId: Optional[str] = Form(None),
  amount: Optional[str] = Form(None),
  status: Optional[str] = Form(None),
) -> Dict[str, Optional[str]]:
  return {"customerId": customerId, "amount": amount, "status": status}

def get_invoice_actions(
  session: Session = Depends(get_session),
  cache: ViewCache = Depends(get_view_cache),
) -> InvoiceActions:
  return InvoiceActions(session, cache.invalidate)

def _to_schema(inv: Invoice) -> InvoiceSchema:
  return InvoiceSchema(
    id=inv.id,
    customer_id=inv.customer_id,
    amount=from_cents(inv.amount),
    status=inv.status,
    date=inv.date,
  )

def _load_invoices(session: Session) -> List[Dict[str, Any]]:
  stmt = (
    select(Invoice, Customer)
    .join(Customer, Invoice.customer_id == Customer.id)
    .order_by(col(Invoice.date).desc())
  )
  rows = []
  for inv, cust in session.exec(stmt).all():
    row = InvoiceRow(**_to_schema(inv).model_dump(), name=cust.name, email=cust.email)
    rows.append(row.model_dump(by_alias=True))
  return rows

@router.get("")
def dashboard(current: AuthSession = Depends(require_session)):
  return {"user": {"name": current.name, "email": current.email}, "nav": NAV_LINKS}

@router.get("/invoices")
def list_invoices(
  q: Optional[str] = None,
  session: Session = Depends(get_session),
  cache: ViewCache = Depends(get_view_cache),
):
  rows = cache.get_or_set(INVOICES_PATH, lambda: _load_invoices(session))
  if not q:
    return rows
  return [r for r in rows if _match(q, r["name"], r["email"], r["status"], str(r["amount"]))]

@router.get("/invoices/{invoice_id}", response_model=InvoiceSchema)
def get_invoice(invoice_id: str, session: Session = Depends(get_session)):
  inv = session.get(Invoice, invoice_id)
  if not inv:
    raise HTTPException(status_code=404, detail="Invoice not found")
  return _to_schema(inv)

@router.post("/invoices")
def create_invoice(
  form: Dict[str, Optional[str]] = Depends(invoice_form),
  actions: InvoiceActions = Depends(get_invoice_actions),
):
  return actions.create_invoice(None, form).model_dump(exclude_none=True)

@router.post("/invoices/{invoice_id}/edit")
def update_invoice(
  invoice_id: str,
  form: Dict[str, Optional[str]] = Depends(invoice_form),
  actions: InvoiceActions = Depends(get_invoice_actions),
):
  update_with_id = bind_invoice_id(actions, invoice_id)
  return update_with_id(None, form).model_dump(exclude_none=True)

@router.post("/invoices/{invoice_id}/delete")
def delete_invoice(invoice_id: str, actions: InvoiceActions = Depends(get_invoice_actions)):
  return actions.delete_invoice(invoice_id).model_dump(exclude_none=True)

@router.get("/customers", response_model=List[Customer])
def list_customers(q: Optional[str] = None, session: Session = Depends(get_session)):
  rows = session.exec(select(Customer).order_by(col(Customer.name))).all()
  if not q:
    return rows
  return [r for r in rows if _match(q, r.id, r.name, r.email)]

@seed_router.post("/seed")
def seed_if_empty(
  session: Session = Depends(get_session),
  cache: ViewCache = Depends(get_view_cache),
):
  # Seed only if DB is empty
  any_customer = session.exec(select(Customer)).first()
  if any_customer:
    return {"ok": True, "seeded": False}

  evil = Customer(name="Evil Rabbit", email="evil@rabbit.com")
  delba = Customer(name="Delba de Oliveira", email="delba@oliveira.com")
  lee = Customer(name="Lee Robinson", email="lee@robinson.com")
  session.add_all([evil, delba, lee])

  if not session.exec(select(User)).first():
    session.add(User(name="User", email="user@nextmail.com", password=hash_password("123456")))

  session.add_all([
    Invoice(customer_id=evil.id, amount=15795, status="pending", date=datetime(2022, 12, 6, tzinfo=timezone.utc)),
    Invoice(customer_id=delba.id, amount=20348, status="pending", date=datetime(2022, 11, 14, tzinfo=timezone.utc)),
    Invoice(customer_id=lee.id, amount=3040, status="paid", date=datetime(2022, 10, 29, tzinfo=timezone.utc)),
    Invoice(customer_id=evil.id, amount=44800, status="paid", date=datetime(2023, 9, 10, tzinfo=timezone.utc)),
  ])

  session.commit()
  cache.invalidate(INVOICES_PATH)
  return {"ok": True, "seeded": True}
