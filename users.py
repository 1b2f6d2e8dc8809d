from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from auth import get_current_user
from database import get_db, User
from repository import get_user_by_id
from schemas import UserPublic
from utils import send_response

users_router = APIRouter()


@users_router.get("/me")
async def get_me(current_user: User = Depends(get_current_user)):
    return send_response(
        "User retrieved successfully", UserPublic.model_validate(current_user)
    )


@users_router.get("/{user_id}")
async def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return send_response("User retrieved successfully", UserPublic.model_validate(user))
