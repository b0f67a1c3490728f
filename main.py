import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

import auth_route
import billing_route
from auth import LOGIN_ROUTE, LoginRequired
from db import init_db

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()
CORS_ORIGINS = [
  x.strip()
  for x in os.getenv("CORS_ORIGINS", "http://127.0.0.1:3000,http://localhost:3000").split(",")
  if x.strip()
]

logger = logging.getLogger(__name__)

def setup_logging(level: str = LOG_LEVEL) -> None:
  logging.basicConfig(
    level=getattr(logging, level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
  )

@asynccontextmanager
async def lifespan(app: FastAPI):
  setup_logging()
  init_db()
  logger.info("Invoice dashboard started")
  yield
  logger.info("Invoice dashboard shutting down")

app = FastAPI(title="Invoice Dashboard Backend", version="1.0.0", lifespan=lifespan)
app.add_middleware(
  CORSMiddleware,
  allow_origins=CORS_ORIGINS,
  allow_credentials=True,
  allow_methods=["*"],
  allow_headers=["*"],
)

app.include_router(auth_route.router)
app.include_router(billing_route.router)
app.include_router(billing_route.seed_router)


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired):
  logger.debug("no session for %s, redirecting to %s", request.url.path, LOGIN_ROUTE)
  return RedirectResponse(url=LOGIN_ROUTE, status_code=303)


@app.get("/health")
def health():
  return {"ok": True}
