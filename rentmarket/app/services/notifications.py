"""Notification listing, creation and read-state transitions.

Every operation is scoped to one user's notifications. Read-state changes are
single bulk UPDATEs; the database is the only arbiter of their atomicity.
"""

import json
import logging
from datetime import datetime
from typing import Any, Iterable, List, Optional

from sqlalchemy.orm import Session, joinedload

from rentmarket.app.core.cache import StatsCache, stats_cache
from rentmarket.app.core.settings import get_settings
from rentmarket.app.core.time import utc_now
from rentmarket.app.models.notification import Notification
from rentmarket.app.models.rental_request import RentalRequest
from rentmarket.app.schemas.notification import NotificationRead

logger = logging.getLogger(__name__)

NOTIFICATIONS_TAG = "notifications"
DEFAULT_LIMIT = 20
MAX_LIMIT = 50


def clamp_limit(limit: Optional[int]) -> int:
    if limit is None:
        return DEFAULT_LIMIT
    return max(1, min(limit, MAX_LIMIT))


def list_notifications(db: Session, user_id: int, unread_only: bool = False, limit: int = DEFAULT_LIMIT) -> List[Notification]:
    query = (
        db.query(Notification)
        .options(joinedload(Notification.rental_request).joinedload(RentalRequest.product))
        .filter(Notification.user_id == user_id)
    )
    if unread_only:
        query = query.filter(Notification.is_read.is_(False))
    return (
        query.order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(clamp_limit(limit))
        .all()
    )


def count_unread(db: Session, user_id: int) -> int:
    return (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
        .count()
    )


def build_notification(
    *,
    user_id: int,
    type: str,
    title: str,
    message: str,
    rental_request_id: int | None = None,
    data: Any = None,
) -> Notification:
    """Unsaved notification, for callers that commit it alongside their own rows."""
    return Notification(
        user_id=user_id,
        rental_request_id=rental_request_id,
        type=type,
        title=title,
        message=message,
        data=json.dumps(data, default=str) if data is not None else None,
    )


def create_notification(
    db: Session,
    *,
    user_id: int,
    type: str,
    title: str,
    message: str,
    rental_request_id: int | None = None,
    data: Any = None,
    cache: StatsCache = stats_cache,
) -> Notification:
    notification = build_notification(
        user_id=user_id,
        rental_request_id=rental_request_id,
        type=type,
        title=title,
        message=message,
        data=data,
    )
    db.add(notification)
    db.commit()
    db.refresh(notification)
    cache.invalidate(NOTIFICATIONS_TAG)
    return notification


def invalidate_notifications(cache: StatsCache = stats_cache) -> int:
    return cache.invalidate(NOTIFICATIONS_TAG)


def mark_all_read(db: Session, user_id: int, now: datetime | None = None, cache: StatsCache = stats_cache) -> int:
    """Mark every unread notification of ``user_id`` as read; return rows changed."""
    read_at = now or utc_now()
    count = (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
        .update({Notification.is_read: True, Notification.read_at: read_at}, synchronize_session=False)
    )
    db.commit()
    cache.invalidate(NOTIFICATIONS_TAG)
    logger.info("User %s marked all notifications read (%d changed)", user_id, count)
    return count


def mark_read(
    db: Session,
    user_id: int,
    notification_ids: Iterable[int],
    now: datetime | None = None,
    cache: StatsCache = stats_cache,
) -> int:
    """Mark the caller's notifications in ``notification_ids`` as read.

    Ids belonging to other users, unknown ids and already-read rows are left
    untouched and do not count.
    """
    ids = list(set(notification_ids))
    if not ids:
        return 0
    read_at = now or utc_now()
    count = (
        db.query(Notification)
        .filter(
            Notification.id.in_(ids),
            Notification.user_id == user_id,
            Notification.is_read.is_(False),
        )
        .update({Notification.is_read: True, Notification.read_at: read_at}, synchronize_session=False)
    )
    db.commit()
    cache.invalidate(NOTIFICATIONS_TAG)
    logger.info("User %s marked %d of %d notifications read", user_id, count, len(ids))
    return count


def get_cached_notifications(
    db: Session,
    user_id: int,
    unread_only: bool = False,
    limit: int = DEFAULT_LIMIT,
    cache: StatsCache = stats_cache,
) -> List[dict]:
    limit = clamp_limit(limit)

    def compute() -> List[dict]:
        return [
            NotificationRead.model_validate(n).model_dump()
            for n in list_notifications(db, user_id, unread_only=unread_only, limit=limit)
        ]

    return cache.get_or_compute(
        f"notifications:{user_id}:{unread_only}:{limit}",
        get_settings().notifications_cache_ttl_seconds,
        compute,
        tags=(NOTIFICATIONS_TAG,),
    )


def get_cached_unread_count(db: Session, user_id: int, cache: StatsCache = stats_cache) -> int:
    return cache.get_or_compute(
        f"notification-count:{user_id}",
        get_settings().notifications_cache_ttl_seconds,
        lambda: count_unread(db, user_id),
        tags=(NOTIFICATIONS_TAG,),
    )
