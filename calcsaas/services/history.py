"""Per-user calculation history: append-only writes, newest-first reads, bulk clear."""

import logging
import re
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from calcsaas.core.errors import PersistenceFailure
from calcsaas.models import Calculation

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True)
class HistoryEntry:
    expression: str
    result: str
    created_at: datetime


def parse_limit(raw: str | None, default: int = DEFAULT_LIMIT, maximum: int | None = None) -> int:
    """
    Parse the ?limit= query value like parseInt: leading integer prefix only.
    Missing, unparsable, zero or negative values fall back to default.
    """
    if raw is None:
        return default
    match = _LEADING_INT.match(raw)
    if match is None:
        return default
    value = int(match.group(1))
    if value <= 0:
        return default
    if maximum is not None:
        value = min(value, maximum)
    return value


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on read; values are always written in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class HistoryLedger:
    """
    Append-only calculation log keyed by user id.

    Every operation opens its own session from the injected factory, so
    appends can run after the request that triggered them has finished.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def append(self, user_id: int, expression: str, result_text: str) -> Calculation:
        """Insert one record. Raises SQLAlchemyError on failure; callers decide whether to swallow it."""
        with self._session_factory() as session, session.begin():
            record = Calculation(user_id=user_id, expression=expression, result=result_text)
            session.add(record)
        return record

    def record_calculation(self, user_id: int, expression: str, result_text: str) -> None:
        """Fire-and-forget append: failures are logged and dropped, never retried."""
        try:
            self.append(user_id, expression, result_text)
        except Exception:
            logger.exception("Error saving calculation for user_id=%s", user_id)

    def list(self, user_id: int, limit: int = DEFAULT_LIMIT) -> list[HistoryEntry]:
        """Return at most limit records for user_id, newest first; ties by insertion order."""
        stmt = (
            select(Calculation.expression, Calculation.result, Calculation.created_at)
            .where(Calculation.user_id == user_id)
            .order_by(Calculation.created_at.desc(), Calculation.id.desc())
            .limit(limit)
        )
        try:
            with self._session_factory() as session:
                rows = session.execute(stmt).all()
        except SQLAlchemyError as e:
            logger.error("History read failed for user_id=%s: %s", user_id, e)
            raise PersistenceFailure(cause=e) from e
        return [
            HistoryEntry(expression=r.expression, result=r.result, created_at=_as_utc(r.created_at))
            for r in rows
        ]

    def clear(self, user_id: int) -> int:
        """Delete every record owned by user_id. Idempotent; returns the number removed."""
        try:
            with self._session_factory() as session, session.begin():
                deleted = session.execute(
                    delete(Calculation).where(Calculation.user_id == user_id)
                ).rowcount
        except SQLAlchemyError as e:
            logger.error("History clear failed for user_id=%s: %s", user_id, e)
            raise PersistenceFailure(cause=e) from e
        if deleted:
            logger.info("History cleared: user_id=%s, records_deleted=%s", user_id, deleted)
        return deleted or 0
