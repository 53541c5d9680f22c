"""Bearer token validation for tokens issued by the identity service."""

from jose import JWTError, jwt

from warranty_app.config import get_settings

ALGORITHM = "HS256"


def decode_access_token(token: str) -> dict:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc
