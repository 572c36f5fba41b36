from flask import current_app, session

from .errors import UnauthorizedError


def session_identity() -> str | None:
    """Default identity provider: the user id stored in the Flask session."""
    return session.get("user_id") or None


def current_user_id() -> str | None:
    provider = current_app.config["IDENTITY_PROVIDER"]
    return provider()


def require_user(user_id: str | None) -> str:
    if not user_id:
        raise UnauthorizedError()
    return user_id
