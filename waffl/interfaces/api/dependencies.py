"""FastAPI dependency utilities."""

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from waffl.application.use_cases.push import PushDispatcher, get_push_dispatcher
from waffl.application.use_cases.push.send_push import PushProvider
from waffl.config import get_settings
from waffl.domain.entities import SessionContext
from waffl.infrastructure import database
from waffl.infrastructure.notifications import NotificationStore
from waffl.infrastructure.push import get_push_provider
from waffl.infrastructure.security import session_from_token

bearer_scheme = HTTPBearer(auto_error=False)


def resolve_session(token: str) -> SessionContext:
    """Resolve the signed-in user described by the bearer ``token``."""

    try:
        return session_from_token(token)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc


def get_current_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> SessionContext:
    """Return the session of the user calling the endpoint."""

    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return resolve_session(credentials.credentials)


def get_dispatcher() -> PushDispatcher:
    return get_push_dispatcher()


def get_provider() -> PushProvider | None:
    return get_push_provider()


def get_notification_store() -> NotificationStore:
    return NotificationStore(
        database.SessionLocal, window_size=get_settings().notification_window_size
    )


def verify_push_api_key(x_api_key: str | None = Header(default=None)) -> None:
    """Require the shared secret when the push endpoint is protected."""

    expected = get_settings().push_endpoint_api_key
    if expected and x_api_key != expected:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
        )
