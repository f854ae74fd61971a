"""Credential store: user creation, lookup and password verification."""

import logging
from functools import lru_cache

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from calcsaas.core.errors import (
    DuplicateIdentity,
    InvalidCredentials,
    PersistenceFailure,
    ValidationError,
)
from calcsaas.core.security import PASSWORD_MIN_LEN, hash_password, verify_password
from calcsaas.models import User

logger = logging.getLogger(__name__)


@lru_cache
def _dummy_hash(rounds: int) -> str:
    """Hash checked against when the identifier is unknown, so both failures cost one bcrypt check."""
    return hash_password("dummy-password", rounds)


class CredentialStore:
    """
    Owns User records. Uniqueness of username and email is enforced by the
    database constraints at insert time, so concurrent registrations with the
    same identity cannot both succeed.
    """

    def __init__(self, session: Session, bcrypt_rounds: int) -> None:
        self._session = session
        self._bcrypt_rounds = bcrypt_rounds

    def create_user(self, username: str, email: str, password: str) -> User:
        if not username or not email or not password:
            raise ValidationError("All fields are required")
        if len(password) < PASSWORD_MIN_LEN:
            raise ValidationError(f"Password must be at least {PASSWORD_MIN_LEN} characters")

        user = User(
            username=username,
            email=email,
            password_hash=hash_password(password, self._bcrypt_rounds),
        )
        try:
            self._session.add(user)
            self._session.commit()
        except IntegrityError as e:
            self._session.rollback()
            raise DuplicateIdentity() from e
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.error("User creation failed: %s", e)
            raise PersistenceFailure(cause=e) from e
        logger.info("User created: id=%s, username=%s", user.id, user.username)
        return user

    def find_by_username_or_email(self, identifier: str) -> User | None:
        """Exact, case-sensitive match on either unique key."""
        stmt = select(User).where(or_(User.username == identifier, User.email == identifier))
        try:
            return self._session.execute(stmt).scalars().first()
        except SQLAlchemyError as e:
            logger.error("User lookup failed: %s", e)
            raise PersistenceFailure(cause=e) from e

    def verify_password(self, user: User, candidate_password: str) -> bool:
        return verify_password(candidate_password, user.password_hash)

    def authenticate(self, identifier: str, password: str) -> User:
        """
        Resolve identifier (username or email) and check the password.
        Raises InvalidCredentials for unknown identifiers and wrong passwords alike.
        """
        user = self.find_by_username_or_email(identifier)
        if user is None:
            verify_password(password, _dummy_hash(self._bcrypt_rounds))
            raise InvalidCredentials()
        if not self.verify_password(user, password):
            raise InvalidCredentials()
        return user

    def list_users(self) -> list[User]:
        try:
            return list(self._session.execute(select(User).order_by(User.id)).scalars())
        except SQLAlchemyError as e:
            logger.error("User listing failed: %s", e)
            raise PersistenceFailure(cause=e) from e
