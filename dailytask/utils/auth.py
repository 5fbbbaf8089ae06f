"""Bearer token handling.

``optional_identity`` attaches an identity when the request carries a valid
token and otherwise reports an anonymous request; it never rejects. Routes
that need a user call ``require_identity`` themselves.

An invalid or expired token is treated exactly like a missing one. That keeps
the behaviour existing clients rely on, but it also means a client with a
stale token only learns about it from the route's 401.
"""

from dataclasses import dataclass
from typing import Optional

from flask import current_app, g
from flask_jwt_extended import create_access_token, get_jwt, get_jwt_identity, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from dailytask.errors import Unauthorized

_ANONYMOUS = object()


@dataclass(frozen=True)
class Identity:
    user_id: str
    email: Optional[str] = None


def issue_token(user) -> str:
    return create_access_token(identity=str(user.id), additional_claims={"email": user.email})


def _decode_identity() -> Optional[Identity]:
    try:
        verified = verify_jwt_in_request(optional=True)
    except (JWTExtendedException, PyJWTError) as exc:
        current_app.logger.debug("Ignoring unusable bearer token: %s", exc)
        return None
    if verified is None:
        return None
    user_id = get_jwt_identity()
    if not user_id:
        return None
    return Identity(user_id=str(user_id), email=get_jwt().get("email"))


def optional_identity() -> Optional[Identity]:
    cached = g.get("identity", _ANONYMOUS)
    if cached is _ANONYMOUS:
        cached = _decode_identity()
        g.identity = cached
    return cached


def require_identity() -> Identity:
    identity = optional_identity()
    if identity is None:
        raise Unauthorized("Authentication required")
    return identity
