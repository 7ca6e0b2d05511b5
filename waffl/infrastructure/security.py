"""Bearer token helpers identifying the signed-in user."""

from datetime import timedelta

from jose import JWTError, jwt

from waffl.config import get_settings
from waffl.domain.entities import SessionContext
from waffl.utils import utc_now

ALGORITHM = "HS256"


def create_access_token(
    user_id: str,
    *,
    name: str,
    picture: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    settings = get_settings()
    expire = utc_now() + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    claims = {"sub": user_id, "name": name, "exp": expire}
    if picture:
        claims["picture"] = picture
    return jwt.encode(claims, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, get_settings().secret_key, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc


def session_from_token(token: str) -> SessionContext:
    """Build the :class:`SessionContext` described by ``token``."""

    payload = decode_access_token(token)
    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise ValueError("Could not validate credentials")
    name = payload.get("name")
    picture = payload.get("picture")
    return SessionContext(
        user_id=user_id,
        display_name=name if isinstance(name, str) and name else user_id,
        profile_image_url=picture if isinstance(picture, str) else None,
    )
