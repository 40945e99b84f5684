# tests/services/test_notification_rules.py
"""Unit tests for the notification service rules."""

from unittest.mock import patch

import pytest
from fastapi import status
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from dongne_board.core.settings import settings
from dongne_board.models import (
    Comment,
    Empathy,
    EmpathyThresholdEvent,
    Notification,
    NotificationType,
    User,
)
from dongne_board.services.notifications import NotificationService


def _fail_queries_for(monkeypatch, db_session, model) -> None:
    """Make `db_session.query(model)` raise while other queries still work."""
    original = db_session.query

    def query(*entities, **kwargs):
        if entities and entities[0] is model:
            raise OperationalError("SELECT", {}, Exception("database is locked"))
        return original(*entities, **kwargs)

    monkeypatch.setattr(db_session, "query", query)


@pytest.fixture()
def service(owner_user) -> NotificationService:
    return NotificationService(
        owner_open_id=owner_user.open_id,
        threshold=5,
        notify_every=10,
        notify_first=3,
    )


@pytest.mark.parametrize(
    ("count", "expected"),
    [(1, 1), (3, 1), (4, 0), (9, 0), (10, 1), (20, 1), (21, 0)],
)
def test_sampling_rule(
    service, test_post, other_user, db_session, count: int, expected: int
) -> None:
    service.threshold = 1000
    service.empathy_added(db_session, test_post, other_user, count)

    sent = db_session.query(Notification).filter(
        Notification.type == NotificationType.EMPATHY_ON_POST
    ).count()
    assert sent == expected


def test_threshold_only_fires_on_exact_count(
    service, test_post, other_user, owner_user, db_session
) -> None:
    service.empathy_added(db_session, test_post, other_user, 4)
    service.empathy_added(db_session, test_post, other_user, 6)
    assert db_session.query(Notification).filter(
        Notification.type == NotificationType.ADMIN_NOTICE
    ).count() == 0

    service.empathy_added(db_session, test_post, other_user, 5)
    service.empathy_added(db_session, test_post, other_user, 5)
    assert db_session.query(Notification).filter(
        Notification.type == NotificationType.ADMIN_NOTICE,
        Notification.user_id == owner_user.id,
    ).count() == 1


def test_owner_acting_on_threshold_is_not_notified(
    service, test_post, owner_user, test_user, db_session
) -> None:
    service.empathy_added(db_session, test_post, owner_user, 5)

    assert db_session.query(Notification).filter(
        Notification.user_id == owner_user.id
    ).count() == 0
    assert db_session.query(Notification).filter(
        Notification.user_id == test_user.id,
        Notification.type == NotificationType.EMPATHY_THRESHOLD_REACHED,
    ).count() == 1


def test_author_is_never_notified_about_own_action(
    service, test_post, test_user, db_session
) -> None:
    comment = Comment(post_id=test_post.id, user_id=test_user.id, content="self")
    db_session.add(comment)
    db_session.commit()

    service.comment_created(db_session, test_post, comment, test_user)
    service.empathy_added(db_session, test_post, test_user, 1)

    assert db_session.query(Notification).count() == 0


def test_notification_failure_is_swallowed(service, test_post, other_user, db_session) -> None:
    with patch(
        "dongne_board.services.notifications.Notification",
        side_effect=SQLAlchemyError("boom"),
    ):
        result = service.notify(
            db_session,
            recipient_id=test_post.user_id,
            actor_id=other_user.id,
            n_type=NotificationType.COMMENT_ON_POST,
            title="댓글 알림",
        )

    assert result is None
    assert db_session.query(Notification).count() == 0


def test_comment_survives_notification_failure(
    client, test_post, other_headers, db_session
) -> None:
    with patch(
        "dongne_board.services.notifications.Notification",
        side_effect=SQLAlchemyError("boom"),
    ):
        response = client.post(
            "/api/v1/comments/",
            json={"post_id": test_post.id, "content": "알림이 실패해도 남아야 함"},
            headers=other_headers,
        )

    assert response.status_code == status.HTTP_201_CREATED
    comment = db_session.get(Comment, response.json()["comment_id"])
    assert comment is not None
    db_session.refresh(test_post)
    assert test_post.comment_count == 1
    assert db_session.query(Notification).count() == 0


def test_threshold_lookup_failure_keeps_empathy(
    client, make_user, headers_for, test_post, db_session, monkeypatch
) -> None:
    for _ in range(settings.empathy_threshold - 1):
        db_session.add(Empathy(user_id=make_user().id, post_id=test_post.id))
    test_post.empathy_count = settings.empathy_threshold - 1
    db_session.commit()
    headers = headers_for(make_user())
    _fail_queries_for(monkeypatch, db_session, EmpathyThresholdEvent)

    response = client.post(f"/api/v1/empathy/{test_post.id}", headers=headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["empathy_count"] == settings.empathy_threshold
    monkeypatch.undo()
    db_session.refresh(test_post)
    assert test_post.empathy_count == settings.empathy_threshold
    assert db_session.query(Empathy).count() == settings.empathy_threshold
    assert db_session.query(EmpathyThresholdEvent).count() == 0


def test_owner_lookup_failure_still_notifies_author(
    service, test_post, test_user, other_user, owner_user, db_session, monkeypatch
) -> None:
    _fail_queries_for(monkeypatch, db_session, User)

    service.empathy_added(db_session, test_post, other_user, 5)

    monkeypatch.undo()
    event = db_session.query(EmpathyThresholdEvent).one()
    assert event.notification_sent is True
    assert db_session.query(Notification).filter(
        Notification.user_id == test_user.id,
        Notification.type == NotificationType.EMPATHY_THRESHOLD_REACHED,
    ).count() == 1
    assert db_session.query(Notification).filter(
        Notification.user_id == owner_user.id
    ).count() == 0
