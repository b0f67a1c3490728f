# auth_route.py
import functools
from typing import Optional
from fastapi import APIRouter, Depends, Form, Response

from actions import SIGN_IN_SUCCESS, authenticate
from auth import LOGIN_ROUTE, SessionProvider, get_session_provider

router = APIRouter(tags=["auth"])

@router.get(LOGIN_ROUTE)
def login_page():
  return {"message": "Please log in to continue."}

@router.post(LOGIN_ROUTE)
def login(
  response: Response,
  email: Optional[str] = Form(None),
  password: Optional[str] = Form(None),
  provider: SessionProvider = Depends(get_session_provider),
):
  sign_in = functools.partial(provider.sign_in, response=response)
  message = authenticate(None, {"email": email, "password": password}, sign_in)
  if message != SIGN_IN_SUCCESS:
    response.status_code = 401
  return {"message": message}

@router.post("/logout")
def logout(response: Response, provider: SessionProvider = Depends(get_session_provider)):
  provider.sign_out(response)
  return {"ok": True}
