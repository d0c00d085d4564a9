"""Authentication endpoints - sign in, sign up, token refresh, invites."""

from fastapi import APIRouter, Response, status
from starlette.requests import Request

from src.siteline.api.dependencies import (
    AuthServiceDep,
    InviteServiceDep,
    RegistrationServiceDep,
)
from src.siteline.core.rate_limit import limiter, login_limit, signup_limit
from src.siteline.schemas.auth import (
    AcceptInviteRequest,
    AuthResponse,
    LoginRequest,
    LogoutRequest,
    RefreshRequest,
    RefreshResponse,
    SignupRequest,
    SignupResponse,
    UserRead,
)
from src.siteline.schemas.profile import ProfileRead
from src.siteline.services.auth_service import SignedIn

router = APIRouter(prefix="/auth", tags=["auth"])


def _signed_in(result: SignedIn) -> AuthResponse:
    return AuthResponse(
        user=UserRead.model_validate(result.user),
        session=result.session,
        profile=ProfileRead.model_validate(result.profile),
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Sign in",
    responses={
        200: {"description": "Signed in; returns user, session tokens and profile"},
        401: {"description": "Invalid credentials"},
        429: {"description": "Too many attempts"},
    },
)
@limiter.limit(login_limit)
async def login(
    request: Request, login_data: LoginRequest, service: AuthServiceDep
) -> AuthResponse:
    return _signed_in(await service.login(login_data.email, login_data.password))


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sign up",
    responses={
        201: {"description": "User and profile created"},
        400: {"description": "Missing field, weak password or invalid role"},
        409: {"description": "User with this email already exists"},
    },
)
@limiter.limit(signup_limit)
async def signup(
    request: Request, signup_data: SignupRequest, service: RegistrationServiceDep
) -> SignupResponse:
    user, profile = await service.signup(signup_data)
    return SignupResponse(
        user=UserRead.model_validate(user), profile=ProfileRead.model_validate(profile)
    )


@router.post(
    "/refresh",
    response_model=RefreshResponse,
    summary="Refresh session",
    description="Exchange a refresh token for a new token pair. The old refresh token is revoked.",
    responses={401: {"description": "Invalid, expired or revoked refresh token"}},
)
async def refresh(refresh_data: RefreshRequest, service: AuthServiceDep) -> RefreshResponse:
    return RefreshResponse(session=await service.refresh(refresh_data.refresh_token))


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Sign out",
    responses={204: {"description": "Refresh token revoked (or already unknown)"}},
)
async def logout(logout_data: LogoutRequest, service: AuthServiceDep) -> Response:
    await service.logout(logout_data.refresh_token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/accept-invite",
    response_model=AuthResponse,
    summary="Accept invitation",
    description="Set a password with the emailed invite token and sign in.",
    responses={400: {"description": "Invalid or expired invite"}},
)
@limiter.limit(signup_limit)
async def accept_invite(
    request: Request, invite_data: AcceptInviteRequest, service: InviteServiceDep
) -> AuthResponse:
    return _signed_in(await service.accept_invite(invite_data.token, invite_data.password))
