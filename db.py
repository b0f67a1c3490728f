# db.py
import os
from dotenv import load_dotenv
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "").strip()
if not DATABASE_URL:
  raise RuntimeError("DATABASE_URL is not set in backend .env")

_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")

def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
  cursor = dbapi_connection.cursor()
  cursor.execute("PRAGMA foreign_keys=ON")
  cursor.close()

def create_db_engine(url: str) -> Engine:
  if not url.startswith("sqlite"):
    return create_engine(url, echo=False, pool_pre_ping=True)

  kwargs = {"connect_args": {"check_same_thread": False}}
  if url in _MEMORY_URLS:
    # one shared connection, otherwise every checkout sees an empty database
    kwargs["poolclass"] = StaticPool
  eng = create_engine(url, echo=False, **kwargs)
  event.listen(eng, "connect", _enable_sqlite_foreign_keys)
  return eng

engine = create_db_engine(DATABASE_URL)

def init_db(target: Engine = engine) -> None:
  # register tables on the metadata before creating them
  import models  # noqa: F401
  SQLModel.metadata.create_all(target)

def get_session():
  with Session(engine) as session:
    yield session
