# dependencies.py
"""
Shared FastAPI dependencies.

verify_token validates the bearer JWT issued by the CondoEase auth service;
the maintenance routes only need the caller's user id (`id` claim).
"""
import os

from dotenv import load_dotenv
from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt

load_dotenv()
SECRET_KEY = os.getenv("JWT_SECRET")
ALGORITHM = "HS256"


def verify_token(request: Request) -> dict:
     auth = request.headers.get("Authorization")
     if not auth or not auth.startswith("Bearer "):
          raise HTTPException(status_code=401, detail="Missing token")
     token = auth.split(" ")[1]
     try:
          return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
     except JWTError:
          raise HTTPException(status_code=403, detail="Invalid token")


def get_current_user_id(token: dict = Depends(verify_token)) -> int:
     user_id = token.get("id")
     if user_id is None:
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Token has no user id")
     return int(user_id)
