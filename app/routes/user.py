# ========================================
# app/routes/user.py
# ========================================

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from pymongo.errors import DuplicateKeyError

from app.database import get_db
from app.models.user import User
from app.schemas.application import ApiResponse
from app.schemas.user import TokenResponse, UserCreate, UserLogin, UserResponse
from app.utils.auth import create_access_token, get_current_user
from app.utils.security import get_password_hash, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


def user_summary(user: dict) -> dict:
    profile = User.model_validate(user)
    return UserResponse(id=profile.id, name=profile.name, email=profile.email, role=profile.role).model_dump()


# ✅ 1. REGISTER
@router.post("/register", status_code=201, response_model=ApiResponse, response_model_exclude_none=True)
async def register_user(user: UserCreate, db=Depends(get_db)):
    """Register a new applicant account. Admin rights are granted out of band."""

    email = user.email.lower()
    existing_user = await db.users.find_one({"email": email})
    if existing_user:
        raise HTTPException(status_code=400, detail="Email already registered")

    user_dict = {
        "name": user.name.strip(),
        "email": email,
        "password": get_password_hash(user.password),
        "role": "user",
        "createdAt": datetime.now(timezone.utc),
    }

    try:
        result = await db.users.insert_one(user_dict)
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="Email already registered")

    logger.info("New user registered: %s", email)
    user_dict["_id"] = result.inserted_id
    return {"success": True, "data": user_summary(user_dict)}


# ✅ 2. LOGIN
@router.post("/login", response_model=ApiResponse, response_model_exclude_none=True)
async def login(user_credentials: UserLogin, db=Depends(get_db)):
    """Exchange credentials for a bearer token."""

    user = await db.users.find_one({"email": user_credentials.email.strip().lower()})
    if not user or not verify_password(user_credentials.password, user["password"]):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    access_token = create_access_token(data={"sub": user["email"]})
    token = TokenResponse(access_token=access_token, token_type="bearer")
    return {"success": True, "data": token.model_dump()}


# ✅ 3. GET MY PROFILE
@router.get("/profile", response_model=ApiResponse, response_model_exclude_none=True)
async def get_profile(current_user: dict = Depends(get_current_user)):
    return {"success": True, "data": user_summary(current_user)}
