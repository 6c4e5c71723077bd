"""Authentication dependencies.

``get_current_user_id`` only decodes the bearer token; it never opens a
database session, so unauthenticated requests stop before the data store.
"""

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from rentmarket.app.core.errors import AuthenticationError
from rentmarket.app.core.security import decode_access_token
from rentmarket.app.db.session import get_db
from rentmarket.app.models.user import User


def get_current_user_id(authorization: str | None = Header(default=None)) -> int:
    # Expect Authorization: Bearer <token>
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthenticationError("Authentication required")
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise AuthenticationError("Authentication required")
    try:
        payload = decode_access_token(token)
    except ValueError:
        raise AuthenticationError("Invalid token")

    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid token")


def get_current_user(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user or not user.is_active:
        raise AuthenticationError("Invalid token")
    return user
