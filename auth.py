from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from datetime import datetime, timedelta, timezone
from typing import Optional
import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError

from config import settings
from constants import AUTH_MESSAGES
from database import get_db, User
from logging_config import get_logger
from repository import create_user, get_user_by_email, get_user_by_id
from schemas import AuthResult, UserCreate, UserLogin, UserPublic
from utils import send_response

auth_router = APIRouter()
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)
logger = get_logger("auth")

_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    try:
        return _hasher.verify(password_hash, password)
    except (VerifyMismatchError, InvalidHash, VerificationError):
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_EXPIRES_MINUTES)
    )
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.ALGORITHM)
    return encoded_jwt


def issue_token(user: User) -> str:
    return create_access_token(data={"sub": str(user.id), "email": user.email})


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme), db: Session = Depends(get_db)
):
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authorized to access this route",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if not token:
        raise credentials_exception
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.ALGORITHM])
        user_id = int(payload.get("sub"))
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired")
    except (jwt.InvalidTokenError, TypeError, ValueError):
        raise credentials_exception

    user = get_user_by_id(db, user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="User not found")
    return user


def _auth_result(user: User, response: Response) -> AuthResult:
    token = issue_token(user)
    response.headers["Authorization"] = f"Bearer {token}"
    return AuthResult(token=token, user=UserPublic.model_validate(user))


@auth_router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(user: UserCreate, response: Response, db: Session = Depends(get_db)):
    if get_user_by_email(db, user.email):
        raise HTTPException(status_code=400, detail=AUTH_MESSAGES["EMAIL_EXISTS"])

    new_user = create_user(
        db, name=user.name, email=user.email, password_hash=hash_password(user.password)
    )
    if new_user is None:
        # lost a race with a concurrent registration for the same email
        raise HTTPException(status_code=400, detail=AUTH_MESSAGES["EMAIL_EXISTS"])
    logger.info("User registered", extra={"user_id": new_user.id})

    return send_response(AUTH_MESSAGES["REGISTER_SUCCESS"], _auth_result(new_user, response))


@auth_router.post("/login")
async def login(user: UserLogin, response: Response, db: Session = Depends(get_db)):
    db_user = get_user_by_email(db, user.email)
    if not db_user or not verify_password(db_user.password, user.password):
        logger.warning("Failed login attempt", extra={"email": user.email})
        raise HTTPException(status_code=401, detail=AUTH_MESSAGES["INVALID_CREDENTIALS"])

    return send_response(AUTH_MESSAGES["LOGIN_SUCCESS"], _auth_result(db_user, response))


@auth_router.post("/logout")
async def logout(current_user: User = Depends(get_current_user)):
    # tokens are stateless; the client discards its copy
    return send_response(AUTH_MESSAGES["LOGOUT_SUCCESS"])


@auth_router.get("/me")
async def me(current_user: User = Depends(get_current_user)):
    return send_response(
        "Current user retrieved successfully", UserPublic.model_validate(current_user)
    )
