"""
Authentication endpoints.

Handles user registration, login, logout and the current user.
"""

import logging
from typing import Optional

from fastapi import APIRouter, status
from pydantic import AliasChoices, BaseModel, Field

from ..deps import ServicesDep, CurrentAuth, CurrentUser

logger = logging.getLogger(__name__)

router = APIRouter()


# Request/Response models
# Request fields are all optional here; required-ness is checked by the
# service so that every missing field is reported at once.

class RegisterRequest(BaseModel):
    """User registration request."""
    firstname: Optional[str] = Field(None, description="First name")
    lastname: Optional[str] = Field(None, description="Last name")
    email: Optional[str] = Field(None, description="Email address")
    phone_number: Optional[str] = Field(None, description="Turkish mobile number (e.g., 905321234567)")
    password: Optional[str] = Field(None, description="Password (min 8 chars, mixed case, number, symbol)")


class LoginRequest(BaseModel):
    """Login request."""
    email_or_phone: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("email_or_phone", "email_phone"),
        description="Email address or phone number"
    )
    password: Optional[str] = Field(None, description="Password")
    remember_me: Optional[bool] = Field(None, description="Issue a 4-week token")


class UserResponse(BaseModel):
    """User info response."""
    id: str
    firstname: str
    lastname: str
    email: str
    phone_number: str
    created_at: str
    updated_at: str


class UserMessageResponse(BaseModel):
    """User with a status message."""
    user: UserResponse
    message: str


class LoginResponse(BaseModel):
    """Login response with the bearer token."""
    user: UserResponse
    access_token: str
    token_type: str = "Bearer"
    expires_in: str


class MessageResponse(BaseModel):
    message: str


# Endpoints

@router.post(
    "/register",
    response_model=UserMessageResponse,
    status_code=status.HTTP_201_CREATED
)
async def register(request: RegisterRequest, services: ServicesDep):
    """
    Register a new user.

    Returns the created user; log in afterwards to get a token.
    """
    user = services.user_auth.register(request.model_dump())

    return {
        "user": user.to_public_dict(),
        "message": "Created successfully",
    }


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, services: ServicesDep):
    """
    Login with email or phone number and password.

    With remember_me the token is valid for 4 weeks.
    """
    result = services.user_auth.login(request.model_dump())
    return result.to_dict()


@router.post("/logout", response_model=MessageResponse)
async def logout(auth: CurrentAuth, services: ServicesDep):
    """
    Logout (revoke the token used for this request).

    Requires valid access token.
    """
    services.user_auth.logout(auth.user, auth.token)
    return {"message": "Successfully logged out."}


@router.get("/user", response_model=UserMessageResponse)
async def get_current_user_info(current_user: CurrentUser, services: ServicesDep):
    """
    Get current authenticated user info.

    Requires valid access token.
    """
    user = services.user_auth.current_user(current_user)
    return {
        "user": user.to_public_dict(),
        "message": "Retrieved successfully",
    }
