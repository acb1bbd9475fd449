"""Request-scoped dependencies shared by the routers."""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from field_service.db.session import get_db
from field_service.services.auth_gateway import AuthGateway, SessionContext

bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_gateway(db: Session = Depends(get_db)) -> AuthGateway:
    return AuthGateway(db)


def get_session_context(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    gateway: AuthGateway = Depends(get_auth_gateway),
) -> SessionContext:
    token = credentials.credentials if credentials else None
    return gateway.resolve(token)
