# models.py
from uuid import uuid4
from datetime import datetime, timezone
from sqlmodel import SQLModel, Field

def _new_id() -> str:
  return str(uuid4())

def _now() -> datetime:
  return datetime.now(timezone.utc)

class Customer(SQLModel, table=True):
  __tablename__ = "customers"

  id: str = Field(default_factory=_new_id, primary_key=True, index=True)
  name: str
  email: str
  created_at: datetime = Field(default_factory=_now)

class Invoice(SQLModel, table=True):
  __tablename__ = "invoices"

  id: str = Field(default_factory=_new_id, primary_key=True, index=True)
  customer_id: str = Field(foreign_key="customers.id", index=True)
  amount: int  # cents
  status: str = "pending"  # pending|paid
  date: datetime = Field(default_factory=_now)

class User(SQLModel, table=True):
  __tablename__ = "users"

  id: str = Field(default_factory=_new_id, primary_key=True)
  name: str
  email: str = Field(unique=True, index=True)
  password: str  # argon2 hash
