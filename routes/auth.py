# routes/auth.py
from fastapi import APIRouter, HTTPException, Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from datetime import datetime, timedelta, timezone
from typing import Optional
import bcrypt
import logging

from config import JWT_SECRET, JWT_ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES
from database import Store, get_store, USERS, LESSONS, PROGRESS, new_id, server_timestamp
from models.user import AuthUser, LoginRequest, RegisterRequest
from services.errors import Unauthenticated, Unauthorized
from services.progress import summarize_statuses, percent_of

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/auth", tags=["auth"])
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/v1/auth/login", auto_error=False)


def create_access_token(uid: str, email: str = "", expires_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    return jwt.encode({"sub": uid, "email": email, "exp": expire}, JWT_SECRET, algorithm=JWT_ALGORITHM)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


def decode_token(token: str) -> AuthUser:
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.warning(f"Token verification failed: {e}")
        raise Unauthenticated("Invalid or expired token.")
    uid = payload.get("sub")
    if not uid:
        logger.warning("Token verification failed: missing subject")
        raise Unauthenticated("Invalid or expired token.")
    return AuthUser(uid=uid, email=payload.get("email") or "", name=payload.get("name"))


async def authenticate(token: Optional[str] = Depends(oauth2_scheme)) -> AuthUser:
    if not token:
        raise Unauthenticated("Missing or malformed Authorization header.")
    return decode_token(token)


async def optional_user(token: Optional[str] = Depends(oauth2_scheme)) -> Optional[AuthUser]:
    """Identity when a bearer token is sent, None for anonymous callers."""
    if not token:
        return None
    return decode_token(token)


async def require_admin(user: AuthUser = Depends(authenticate), store: Store = Depends(get_store)) -> AuthUser:
    user_doc = await store.get(USERS, user.uid)
    if not user_doc or user_doc.get("role") != "admin":
        logger.warning(f"Admin access denied for {user.uid}")
        raise Unauthorized("Forbidden — admin access required.")
    return user


def _public_user(user: dict) -> dict:
    return {
        "uid": user["id"],
        "email": user.get("email", ""),
        "displayName": user.get("displayName", ""),
        "role": user.get("role", "learner"),
    }


@router.post("/register", status_code=201)
async def register(request: RegisterRequest, store: Store = Depends(get_store)):
    email = request.email.strip().lower()
    logger.info(f"Registration attempt for email: {email}")
    if len(request.password.encode("utf-8")) > 72:
        raise HTTPException(status_code=400, detail="Password must be at most 72 bytes.")
    if await store.find(USERS, {"email": email}, limit=1):
        raise HTTPException(status_code=400, detail="Email already registered.")

    uid = new_id()
    now = server_timestamp()
    user = {
        "email": email,
        "displayName": request.displayName or email,
        "role": "learner",
        "passwordHash": hash_password(request.password),
        "createdAt": now,
        "updatedAt": now,
    }
    await store.insert(USERS, user, doc_id=uid)
    user["id"] = uid
    return {
        "access_token": create_access_token(uid, email),
        "token_type": "bearer",
        "user": _public_user(user),
    }


@router.post("/login")
async def login(request: LoginRequest, store: Store = Depends(get_store)):
    email = request.email.strip().lower()
    logger.info(f"Login attempt for email: {email}")
    users = await store.find(USERS, {"email": email}, limit=1)
    user = users[0] if users else None
    if not user or not verify_password(request.password, user.get("passwordHash", "")):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return {
        "access_token": create_access_token(user["id"], email),
        "token_type": "bearer",
        "user": _public_user(user),
    }


@router.get("/me")
async def me(current_user: AuthUser = Depends(authenticate), store: Store = Depends(get_store)):
    uid = current_user.uid
    user = await store.get(USERS, uid)
    if not user:
        # first visit from this identity
        now = server_timestamp()
        user = {
            "email": current_user.email,
            "displayName": current_user.name or current_user.email,
            "role": "learner",
            "createdAt": now,
            "updatedAt": now,
        }
        await store.insert(USERS, user, doc_id=uid)
        logger.info(f"Created user document for {uid}")

    summary = summarize_statuses(await store.find(PROGRESS, {"userId": uid}))
    total_lessons = await store.count(LESSONS, {"published": True})

    return {
        "uid": uid,
        "email": user.get("email") or current_user.email,
        "displayName": user.get("displayName", ""),
        "role": user.get("role", "learner"),
        "createdAt": user.get("createdAt"),
        "progress": {
            "totalLessons": total_lessons,
            "completed": summary["completed"],
            "inProgress": summary["inProgress"],
            "percentComplete": percent_of(summary["completed"], total_lessons),
        },
    }
