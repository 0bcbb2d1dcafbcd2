# dependencies.py
"""
Shared FastAPI dependencies.
"""
import os
from typing import Optional

from fastapi import HTTPException, Request
from jose import JWTError, jwt
from dotenv import load_dotenv

load_dotenv()

ALGORITHM = "HS256"


def verify_token(request: Request) -> dict:
     """Decode the bearer JWT; 401 when missing, 403 when invalid."""
     auth = request.headers.get("Authorization")
     if not auth or not auth.startswith("Bearer "):
          raise HTTPException(status_code=401, detail="Missing token")
     token = auth.split(" ")[1]
     try:
          return jwt.decode(token, os.getenv("JWT_SECRET"), algorithms=[ALGORITHM])
     except JWTError:
          raise HTTPException(status_code=403, detail="Invalid token")


def actor_from_token(token: dict) -> Optional[str]:
     """Name recorded in audit columns (changed_by, processed_by...)."""
     actor = token.get("email") or token.get("id")
     return str(actor) if actor is not None else None
