# vedic_api/api/v1/auth.py
from __future__ import annotations
from typing import Any

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from vedic_api.api.deps import get_auth_service, get_current_claims
from vedic_api.core.errors import AuthErrorCode
from vedic_api.core.result import Err, Result
from vedic_api.schemas.auth import (
    AuthSession,
    ChangePasswordRequest,
    ErrorBody,
    LoginRequest,
    RefreshTokenRequest,
    SignupRequest,
    normalize_email,
)
from vedic_api.schemas.token import AccessClaims
from vedic_api.schemas.user import EmailAvailability, UserProfile
from vedic_api.services.auth import AuthSessionService

router = APIRouter()

# ---------- result -> HTTP ----------
STATUS_BY_CODE = {
    AuthErrorCode.DUPLICATE_EMAIL: status.HTTP_400_BAD_REQUEST,
    AuthErrorCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    AuthErrorCode.INACTIVE_ACCOUNT: status.HTTP_401_UNAUTHORIZED,
    AuthErrorCode.INVALID_TOKEN: status.HTTP_401_UNAUTHORIZED,
    AuthErrorCode.INVALID_REFRESH_TOKEN: status.HTTP_401_UNAUTHORIZED,
    AuthErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    AuthErrorCode.TRANSIENT_STORAGE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorBody},
    401: {"model": ErrorBody},
    404: {"model": ErrorBody},
    500: {"model": ErrorBody},
}


def error_response(err: Err) -> JSONResponse:
    code = err.error.code
    if code is AuthErrorCode.TRANSIENT_STORAGE:
        # store internals never reach the caller
        body = {"code": "INTERNAL_ERROR", "message": err.error.message}
    else:
        body = {"code": code.value, "message": err.error.message}
    return JSONResponse(status_code=STATUS_BY_CODE[code], content=body)


def unwrap(result: Result[Any]) -> Any:
    if isinstance(result, Err):
        return error_response(result)
    return result.value


# ---------- endpoints ----------
@router.post("/signup", response_model=AuthSession, status_code=status.HTTP_201_CREATED, responses=_ERROR_RESPONSES)
async def signup(body: SignupRequest, service: AuthSessionService = Depends(get_auth_service)):
    result = await service.signup(body.name, body.email, body.password)
    return unwrap(result)


@router.post("/login", response_model=AuthSession, responses=_ERROR_RESPONSES)
async def login(body: LoginRequest, service: AuthSessionService = Depends(get_auth_service)):
    return unwrap(await service.login(body.email, body.password))


@router.post("/refresh-token", response_model=AuthSession, responses=_ERROR_RESPONSES)
async def refresh_token(body: RefreshTokenRequest, service: AuthSessionService = Depends(get_auth_service)):
    return unwrap(await service.refresh_session(body.access_token, body.refresh_token))


@router.post("/logout", responses=_ERROR_RESPONSES)
async def logout(
    claims: AccessClaims = Depends(get_current_claims),
    service: AuthSessionService = Depends(get_auth_service),
):
    result = await service.logout(claims.subject_id)
    if isinstance(result, Err):
        return error_response(result)
    return {"ok": True}


@router.get("/profile", response_model=UserProfile, responses=_ERROR_RESPONSES)
async def profile(
    claims: AccessClaims = Depends(get_current_claims),
    service: AuthSessionService = Depends(get_auth_service),
):
    return unwrap(await service.get_profile(claims.subject_id))


@router.get("/check-email", response_model=EmailAvailability, responses=_ERROR_RESPONSES)
async def check_email(
    email: str = Query(default=""),
    service: AuthSessionService = Depends(get_auth_service),
):
    email = email.strip()
    if not email:
        return JSONResponse(status_code=400, content={"code": "VALIDATION_ERROR", "message": "Email is required"})
    try:
        email = normalize_email(email)
    except ValidationError:
        return JSONResponse(status_code=400, content={"code": "VALIDATION_ERROR", "message": "Invalid email address"})
    result = await service.is_email_available(email)
    if isinstance(result, Err):
        return error_response(result)
    return EmailAvailability(email=email, available=result.value)


@router.post("/change-password", responses=_ERROR_RESPONSES)
async def change_password(
    body: ChangePasswordRequest,
    claims: AccessClaims = Depends(get_current_claims),
    service: AuthSessionService = Depends(get_auth_service),
):
    result = await service.change_password(claims.subject_id, body.current_password, body.new_password)
    if isinstance(result, Err):
        return error_response(result)
    return {"ok": True}
