"""Signup, login and identity endpoints."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rentmarket.app.core.errors import AuthenticationError, InternalError, ValidationError
from rentmarket.app.core.security import create_access_token, get_password_hash, verify_password
from rentmarket.app.db.session import get_db
from rentmarket.app.dependencies.auth import get_current_user
from rentmarket.app.models.user import User
from rentmarket.app.schemas.common import ApiResponse
from rentmarket.app.schemas.user import LoginRequest, LoginResult, UserCreate, UserRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup", response_model=ApiResponse[UserRead], status_code=status.HTTP_201_CREATED)
def signup(user_in: UserCreate, db: Session = Depends(get_db)):
    try:
        existing = db.query(User).filter(User.email == user_in.email).first()
        if existing:
            raise ValidationError("Email already registered")
        user = User(name=user_in.name, email=user_in.email, hashed_password=get_password_hash(user_in.password))
        db.add(user)
        db.commit()
        db.refresh(user)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error registering %s", user_in.email)
        raise InternalError("Failed to create user")
    logger.info("Registered user %s", user.id)
    return {"success": True, "message": "User created successfully", "data": user}


@router.post("/login", response_model=ApiResponse[LoginResult])
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    try:
        user = db.query(User).filter(User.email == credentials.email).first()
    except SQLAlchemyError:
        logger.exception("Error looking up %s", credentials.email)
        raise InternalError("Login failed")
    if not user or not user.hashed_password:
        raise AuthenticationError("Invalid credentials")
    if not user.is_active:
        raise AuthenticationError("User is inactive")
    if not verify_password(credentials.password, user.hashed_password):
        raise AuthenticationError("Invalid credentials")

    token = create_access_token(user_id=user.id)
    return {"success": True, "message": "Login successful", "data": {"user": user, "token": token}}


@router.get("/me", response_model=ApiResponse[UserRead])
def read_me(current_user: User = Depends(get_current_user)):
    return {"success": True, "message": "User retrieved successfully", "data": current_user}
