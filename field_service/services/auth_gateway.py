"""Authentication gateway.

The gateway is the only component that creates, refreshes, resolves or
revokes sessions. Routes receive the resolved session as an explicit
`SessionContext` through a request-scoped dependency.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

import jwt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from field_service.core.config import ACCESS_TOKEN_TTL_MINUTES, SECRET_KEY
from field_service.core.domain_exceptions import DomainException
from field_service.core.error_codes import ErrorCode
from field_service.db.models import AuthSession, User, as_utc, utcnow

logger = logging.getLogger(__name__)

TOKEN_ALGORITHM = "HS256"


@dataclass(frozen=True)
class SessionContext:
    user_id: str
    email: str
    session_id: str
    expires_at: datetime


@dataclass(frozen=True)
class IssuedToken:
    access_token: str
    context: SessionContext


class AuthenticationError(DomainException):
    def __init__(self, message: str = "Authentication required."):
        super().__init__(code=ErrorCode.AUTH_REQUIRED, message=message, status_code=401)


class AuthGateway:
    def __init__(
        self,
        db: Session,
        secret_key: str = SECRET_KEY,
        ttl: timedelta = timedelta(minutes=ACCESS_TOKEN_TTL_MINUTES),
    ):
        self.db = db
        self.secret_key = secret_key
        self.ttl = ttl

    def _issue(self, user: User) -> IssuedToken:
        expires_at = utcnow() + self.ttl
        auth_session = AuthSession(user_id=user.id, expires_at=expires_at)
        try:
            self.db.add(auth_session)
            self.db.commit()
            self.db.refresh(auth_session)
        except SQLAlchemyError:
            self.db.rollback()
            raise

        token = jwt.encode(
            {"sub": user.id, "sid": auth_session.id, "exp": expires_at},
            self.secret_key,
            algorithm=TOKEN_ALGORITHM,
        )
        return IssuedToken(
            access_token=token,
            context=SessionContext(
                user_id=user.id,
                email=user.email,
                session_id=auth_session.id,
                expires_at=expires_at,
            ),
        )

    def sign_up(self, email: str, password: str) -> IssuedToken:
        user = User(email=email.strip().lower(), password_hash=generate_password_hash(password))
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
        except IntegrityError:
            self.db.rollback()
            raise DomainException(
                code=ErrorCode.EMAIL_TAKEN,
                message="An account with this email already exists.",
                status_code=409,
            )

        logger.info("User signed up", extra={"user_id": user.id})
        return self._issue(user)

    def sign_in(self, email: str, password: str) -> IssuedToken:
        user = self.db.scalar(select(User).where(User.email == email.strip().lower()))
        if user is None or not check_password_hash(user.password_hash, password):
            raise DomainException(
                code=ErrorCode.INVALID_CREDENTIALS,
                message="Invalid email or password.",
                status_code=401,
            )
        return self._issue(user)

    def resolve(self, token: str | None) -> SessionContext:
        """Turn a bearer token into a live session or raise AuthenticationError."""
        if not token:
            raise AuthenticationError()

        try:
            claims = jwt.decode(token, self.secret_key, algorithms=[TOKEN_ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Session expired. Please sign in again.")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid session token.")

        auth_session = self.db.get(AuthSession, claims.get("sid"))
        if (
            auth_session is None
            or auth_session.user_id != claims.get("sub")
            or auth_session.revoked_at is not None
            or as_utc(auth_session.expires_at) <= utcnow()
        ):
            raise AuthenticationError("Session is no longer valid.")

        return SessionContext(
            user_id=auth_session.user.id,
            email=auth_session.user.email,
            session_id=auth_session.id,
            expires_at=as_utc(auth_session.expires_at),
        )

    def refresh(self, context: SessionContext) -> IssuedToken:
        """Replace a live session with a fresh one."""
        self.sign_out(context)
        user = self.db.get(User, context.user_id)
        if user is None:
            raise AuthenticationError()
        return self._issue(user)

    def sign_out(self, context: SessionContext) -> None:
        auth_session = self.db.get(AuthSession, context.session_id)
        if auth_session is None or auth_session.revoked_at is not None:
            return
        try:
            auth_session.revoked_at = utcnow()
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
