"""Shared pytest fixtures: in-memory SQLite, a known customer, and the app wired to both."""

import os

# db.py refuses to import without a connection string
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session

import main
from actions import InvoiceActions
from auth import hash_password
from db import create_db_engine, get_session
from models import Customer, Invoice, User
from revalidate import ViewCache, get_view_cache

USER_EMAIL = "user@nextmail.com"
USER_PASSWORD = "123456"


@pytest.fixture
def engine():
  eng = create_db_engine("sqlite://")
  SQLModel.metadata.create_all(eng)
  yield eng
  eng.dispose()


@pytest.fixture
def session(engine):
  with Session(engine) as s:
    yield s


@pytest.fixture
def customer(session):
  c = Customer(id="cust-1", name="Acme Retail", email="billing@acme.test")
  session.add(c)
  session.commit()
  session.refresh(c)
  return c


@pytest.fixture
def invoice(session, customer):
  inv = Invoice(customer_id=customer.id, amount=12000, status="pending")
  session.add(inv)
  session.commit()
  session.refresh(inv)
  return inv


@pytest.fixture
def user(session):
  u = User(name="User", email=USER_EMAIL, password=hash_password(USER_PASSWORD))
  session.add(u)
  session.commit()
  return u


@pytest.fixture
def invalidated():
  return []


@pytest.fixture
def actions(session, invalidated):
  return InvoiceActions(session, invalidated.append)


@pytest.fixture
def cache():
  return ViewCache()


@pytest.fixture
def app(engine, cache):
  def override_session():
    with Session(engine) as s:
      yield s

  main.app.dependency_overrides[get_session] = override_session
  main.app.dependency_overrides[get_view_cache] = lambda: cache
  yield main.app
  main.app.dependency_overrides.clear()


@pytest.fixture
def client(app):
  return TestClient(app)


@pytest.fixture
def auth_client(client, user):
  response = client.post("/login", data={"email": USER_EMAIL, "password": USER_PASSWORD})
  assert response.status_code == 200
  return client
