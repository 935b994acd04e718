from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import BaseModel

from app.data.gateway import FinanceGateway, get_gateway
from app.domain.models.user import AuthSession, UserProfile
from app.domain.services.auth_service import (
    access_token_for,
    authenticate_user,
    change_password,
    get_current_user,
    get_user_profile,
    register_user,
    request_password_reset,
    reset_password,
)
from app.integrations.identity_service import (
    IdentityClient,
    IdentityError,
    get_identity_client,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])


class RegisterRequest(BaseModel):
    full_name: str
    email: str
    password: str


class ForgotPasswordRequest(BaseModel):
    email: str


class ResetPasswordRequest(BaseModel):
    oob_code: str
    new_password: str


class ChangePasswordRequest(BaseModel):
    new_password: str


class ProfileResponse(BaseModel):
    id: str
    email: str
    full_name: str
    created_at: Optional[datetime] = None
    phone_number: Optional[str] = None
    location: Optional[str] = None
    total_expenses: float = 0.0

    @staticmethod
    def from_domain(p: UserProfile) -> "ProfileResponse":
        return ProfileResponse(
            id=p.id,
            email=p.email,
            full_name=p.full_name,
            created_at=p.created_at,
            phone_number=p.phone_number,
            location=p.location,
            total_expenses=p.total_expenses,
        )


@router.post("/register", response_model=ProfileResponse)
def register_user_endpoint(
    req: RegisterRequest,
    identity: IdentityClient = Depends(get_identity_client),
    gateway: FinanceGateway = Depends(get_gateway),
):
    try:
        profile = register_user(
            identity, gateway, req.full_name, req.email, req.password
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ProfileResponse.from_domain(profile)


@router.post("/token")
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    identity: IdentityClient = Depends(get_identity_client),
):
    try:
        session = authenticate_user(identity, form_data.username, form_data.password)
    except IdentityError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"access_token": access_token_for(session), "token_type": "bearer"}


@router.post("/forgot-password")
def forgot_password_endpoint(
    req: ForgotPasswordRequest,
    identity: IdentityClient = Depends(get_identity_client),
):
    try:
        request_password_reset(identity, req.email)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True, "message": "Password reset email sent"}


@router.post("/reset-password")
def reset_password_endpoint(
    req: ResetPasswordRequest,
    identity: IdentityClient = Depends(get_identity_client),
):
    try:
        email = reset_password(identity, req.oob_code, req.new_password)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True, "email": email}


@router.post("/change-password")
def change_password_endpoint(
    req: ChangePasswordRequest,
    current_user: AuthSession = Depends(get_current_user),
    identity: IdentityClient = Depends(get_identity_client),
):
    try:
        session = change_password(identity, current_user, req.new_password)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    # the identity token changes with the password
    return {"access_token": access_token_for(session), "token_type": "bearer"}


@router.get("/me", response_model=ProfileResponse)
def read_users_me(
    current_user: AuthSession = Depends(get_current_user),
    gateway: FinanceGateway = Depends(get_gateway),
):
    profile = get_user_profile(gateway, current_user.user_id)
    if profile is None:
        profile = UserProfile(id=current_user.user_id, email=current_user.email)
    return ProfileResponse.from_domain(profile)
