"""CRUD-style helpers for managing users."""
from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from parley.core import security
from parley.core.errors import StorageError
from parley.db.time import utcnow
from parley.models import User

__all__ = ["UserRepository"]


class UserRepository:
    """Lookups and inserts against the users table."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, user_id: int) -> User | None:
        """Return a single user by primary key."""
        return self.session.get(User, user_id)

    def get_by_username(self, username: str) -> User | None:
        return self.session.scalars(select(User).where(User.username == username)).first()

    def email_taken(self, email: str) -> bool:
        return self.session.scalars(select(User.user_id).where(User.email == email)).first() is not None

    def create(self, *, username: str, email: str, password: str) -> User:
        """Persist a new user with a hashed password and a fresh external id."""
        user = User(
            username=username,
            email=email,
            password=security.hash_password(password),
            external_id=security.new_external_id(),
        )
        try:
            self.session.add(user)
            self.session.commit()
            self.session.refresh(user)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StorageError(f"User insert failed: {exc}") from exc
        return user

    def record_login(self, user: User) -> None:
        """Stamp ``last_login`` with the current time."""
        user.last_login = utcnow()
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StorageError(f"Login update failed: {exc}") from exc

    def list_except(self, user_id: int) -> Sequence[User]:
        """Return every other user, most recently active first."""
        stmt = (
            select(User)
            .where(User.user_id != user_id)
            .order_by(User.last_login.desc().nulls_last(), User.user_id.asc())
        )
        return self.session.scalars(stmt).all()
