import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from warehub.config.database import get_db
from warehub.core.auth.service import AuthService
from warehub.core.auth.schemas import UserLogin, UserRegister, TokenResponse, UserResponse
from warehub.core.auth.policy import primary_role
from warehub.core.auth.dependencies import get_current_user
from warehub.core.exceptions import Conflict, Unauthorized
from warehub.shared.database.models import User

logger = logging.getLogger(__name__)

router = APIRouter()


def serialize_user(user: User) -> UserResponse:
    """Public user shape; never includes the password hash"""
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        roles=list(user.roles or []),
        role=primary_role(user.roles),
        contact_number=user.contact_number,
        is_active=user.is_active,
        created_at=user.created_at
    )


def _token_response(user: User) -> TokenResponse:
    access_token = AuthService.create_token_for_user(user)
    return TokenResponse(
        access_token=access_token,
        token=access_token,
        user=serialize_user(user)
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: UserRegister, db: Session = Depends(get_db)):
    """
    Register a user with one or more roles

    **Roles:** MERCHANT, WAREHOUSE_OWNER, ADMIN (any combination)
    """
    email = payload.email.lower()
    exists = db.query(User).filter(User.email == email).first()
    if exists:
        raise Conflict("Email already registered")

    user = User(
        name=payload.name,
        email=email,
        password_hash=AuthService.get_password_hash(payload.password),
        roles=payload.roles,
        contact_number=payload.contact_number,
        is_active=True
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"👤 User registered: #{user.id} roles={user.roles}")
    return _token_response(user)


@router.post("/login", response_model=TokenResponse)
async def login(credentials: UserLogin, db: Session = Depends(get_db)):
    """Exchange email + password for an access token"""
    user = db.query(User).filter(User.email == credentials.email.strip().lower()).first()

    if not user or not AuthService.verify_password(credentials.password, user.password_hash):
        raise Unauthorized("Invalid credentials")

    if not user.is_active:
        raise Unauthorized("Inactive user")

    return _token_response(user)


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    """Current user with derived primary role"""
    return serialize_user(current_user)
