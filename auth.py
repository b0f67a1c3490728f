# auth.py
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional

from dotenv import load_dotenv
from fastapi import Depends, Request, Response
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel, Field, ValidationError
from sqlmodel import Session, select

from db import get_session
from models import User

load_dotenv()

logger = logging.getLogger(__name__)

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-unsafe").strip()
SESSION_MAX_AGE_MINUTES = int(os.getenv("SESSION_MAX_AGE_MINUTES", "1440"))
ALGORITHM = "HS256"
SESSION_COOKIE = "session_token"
LOGIN_ROUTE = "/login"

# AuthError.type values
CREDENTIALS_SIGNIN = "CredentialsSignin"
CONFIGURATION = "Configuration"

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

def hash_password(password: str) -> str:
  return pwd_context.hash(password)

def verify_password(plain: str, hashed: str) -> bool:
  return bool(pwd_context.verify(plain, hashed))

class AuthError(Exception):
  def __init__(self, type: str, message: str = ""):
    super().__init__(message or type)
    self.type = type

class LoginRequired(Exception):
  """Raised by the session gate; answered with a redirect to the login route."""

class Credentials(BaseModel):
  email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
  password: str = Field(min_length=6)

@dataclass
class AuthSession:
  user_id: str
  email: str
  name: str
  expires: datetime

class SessionProvider:
  def __init__(
    self,
    db: Session,
    secret_key: str = SECRET_KEY,
    max_age_minutes: int = SESSION_MAX_AGE_MINUTES,
  ):
    self.db = db
    self.secret_key = secret_key
    self.max_age_minutes = max_age_minutes

  def sign_in(self, credentials: Mapping[str, Any], response: Response) -> AuthSession:
    if not self.secret_key:
      raise AuthError(CONFIGURATION, "SECRET_KEY is not configured")

    try:
      creds = Credentials.model_validate({
        "email": credentials.get("email"),
        "password": credentials.get("password"),
      })
    except ValidationError:
      raise AuthError(CREDENTIALS_SIGNIN)

    user = self.db.exec(select(User).where(User.email == creds.email)).first()
    if not user or not verify_password(creds.password, user.password):
      logger.info("rejected sign-in for %s", creds.email)
      raise AuthError(CREDENTIALS_SIGNIN)

    session = AuthSession(
      user_id=user.id,
      email=user.email,
      name=user.name,
      expires=datetime.now(timezone.utc) + timedelta(minutes=self.max_age_minutes),
    )
    response.set_cookie(
      key=SESSION_COOKIE,
      value=self.create_token(session),
      httponly=True,
      max_age=self.max_age_minutes * 60,
      samesite="lax",
    )
    return session

  def sign_out(self, response: Response) -> None:
    response.delete_cookie(key=SESSION_COOKIE)

  def create_token(self, session: AuthSession) -> str:
    claims = {
      "sub": session.user_id,
      "email": session.email,
      "name": session.name,
      "exp": session.expires,
    }
    return jwt.encode(claims, self.secret_key, algorithm=ALGORITHM)

  def verify_session(self, token: Optional[str]) -> Optional[AuthSession]:
    if not token:
      return None
    try:
      claims = jwt.decode(token, self.secret_key, algorithms=[ALGORITHM])
      return AuthSession(
        user_id=claims["sub"],
        email=claims["email"],
        name=claims["name"],
        expires=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
      )
    except (JWTError, KeyError, TypeError, ValueError) as e:
      logger.debug("discarding unreadable session token: %s", e)
      return None

def get_session_provider(db: Session = Depends(get_session)) -> SessionProvider:
  return SessionProvider(db)

def require_session(
  request: Request,
  provider: SessionProvider = Depends(get_session_provider),
) -> AuthSession:
  session = provider.verify_session(request.cookies.get(SESSION_COOKIE))
  if session is None:
    raise LoginRequired()
  return session
