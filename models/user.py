# models/user.py
from pydantic import BaseModel, Field
from typing import Optional

class AuthUser(BaseModel):
    """Identity resolved from a bearer token."""
    uid: str
    email: str = ""
    name: Optional[str] = None

class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=8)
    displayName: Optional[str] = None
