"""Sign-up, sign-in, refresh and sign-out."""

from fastapi import APIRouter, Depends

from field_service.routes.dependencies import get_auth_gateway, get_session_context
from field_service.schemas.auth import Credentials, TokenResponse
from field_service.schemas.common import APIResponse
from field_service.services.auth_gateway import AuthGateway, IssuedToken, SessionContext

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_response(issued: IssuedToken) -> TokenResponse:
    return TokenResponse(
        access_token=issued.access_token,
        expires_at=issued.context.expires_at,
        user_id=issued.context.user_id,
        email=issued.context.email,
    )


@router.post("/sign-up", response_model=APIResponse[TokenResponse], status_code=201)
def sign_up(payload: Credentials, gateway: AuthGateway = Depends(get_auth_gateway)):
    issued = gateway.sign_up(payload.email, payload.password)
    return APIResponse(success=True, data=_token_response(issued))


@router.post("/sign-in", response_model=APIResponse[TokenResponse])
def sign_in(payload: Credentials, gateway: AuthGateway = Depends(get_auth_gateway)):
    issued = gateway.sign_in(payload.email, payload.password)
    return APIResponse(success=True, data=_token_response(issued))


@router.post("/refresh", response_model=APIResponse[TokenResponse])
def refresh(
    context: SessionContext = Depends(get_session_context),
    gateway: AuthGateway = Depends(get_auth_gateway),
):
    return APIResponse(success=True, data=_token_response(gateway.refresh(context)))


@router.post("/sign-out", response_model=APIResponse[None])
def sign_out(
    context: SessionContext = Depends(get_session_context),
    gateway: AuthGateway = Depends(get_auth_gateway),
):
    gateway.sign_out(context)
    return APIResponse(success=True, message="Signed out")


@router.get("/session")
def current_session(context: SessionContext = Depends(get_session_context)):
    return APIResponse(
        success=True,
        data={
            "user_id": context.user_id,
            "email": context.email,
            "expires_at": context.expires_at,
        },
    )
