import jwt

from voicefeed.core.config import settings


class TokenError(Exception):
    pass


def decode_access_token(token: str) -> dict:
    """Verify an HS256 access token issued by the auth service sharing ``SECRET_KEY``."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=["HS256"])
    except jwt.PyJWTError as exc:
        raise TokenError("invalid token") from exc

    if payload.get("type") != "access":
        raise TokenError("invalid token type")
    return payload
