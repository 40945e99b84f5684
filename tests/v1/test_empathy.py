# tests/v1/test_empathy.py
"""Tests for empathy endpoints and the escalation threshold."""

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from dongne_board.core.settings import settings
from dongne_board.models import (
    Empathy,
    EmpathyThresholdEvent,
    Notification,
    NotificationType,
    Post,
    User,
)


def _notices(db_session, user: User, n_type: NotificationType) -> list[Notification]:
    return (
        db_session.query(Notification)
        .filter(Notification.user_id == user.id, Notification.type == n_type)
        .all()
    )


def test_add_empathy(
    client: TestClient,
    test_post: Post,
    test_user: User,
    other_headers: dict[str, str],
    db_session,
) -> None:
    response = client.post(f"/api/v1/empathy/{test_post.id}", headers=other_headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True, "empathy_count": 1}

    db_session.refresh(test_post)
    db_session.refresh(test_user)
    assert test_post.empathy_count == 1
    assert test_user.total_empathy == 1
    # The first few empathies are always reported to the author.
    assert len(_notices(db_session, test_user, NotificationType.EMPATHY_ON_POST)) == 1


def test_duplicate_empathy_conflicts(
    client: TestClient, test_post: Post, other_headers: dict[str, str], db_session
) -> None:
    first = client.post(f"/api/v1/empathy/{test_post.id}", headers=other_headers)
    second = client.post(f"/api/v1/empathy/{test_post.id}", headers=other_headers)

    assert first.status_code == status.HTTP_200_OK
    assert second.status_code == status.HTTP_409_CONFLICT
    db_session.refresh(test_post)
    assert test_post.empathy_count == 1
    assert db_session.query(Empathy).count() == 1


def test_empathy_on_missing_post_returns_404(
    client: TestClient, auth_headers: dict[str, str]
) -> None:
    response = client.post("/api/v1/empathy/99999", headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_empathy_requires_login(client: TestClient, test_post: Post) -> None:
    response = client.post(f"/api/v1/empathy/{test_post.id}")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_remove_empathy(
    client: TestClient, test_post: Post, other_headers: dict[str, str], db_session
) -> None:
    client.post(f"/api/v1/empathy/{test_post.id}", headers=other_headers)

    response = client.delete(f"/api/v1/empathy/{test_post.id}", headers=other_headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["empathy_count"] == 0
    db_session.refresh(test_post)
    assert test_post.empathy_count == 0


def test_remove_absent_empathy_is_noop(
    client: TestClient, test_post: Post, other_headers: dict[str, str], db_session
) -> None:
    response = client.delete(f"/api/v1/empathy/{test_post.id}", headers=other_headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["empathy_count"] == 0
    db_session.refresh(test_post)
    assert test_post.empathy_count == 0


def test_mine_and_count(
    client: TestClient,
    test_post: Post,
    auth_headers: dict[str, str],
    other_headers: dict[str, str],
) -> None:
    client.post(f"/api/v1/empathy/{test_post.id}", headers=other_headers)

    assert client.get(f"/api/v1/empathy/{test_post.id}/mine", headers=other_headers).json() is True
    assert client.get(f"/api/v1/empathy/{test_post.id}/mine", headers=auth_headers).json() is False
    assert client.get(f"/api/v1/empathy/{test_post.id}/count").json() == 1


def test_counter_heals_from_ledger(
    client: TestClient,
    test_post: Post,
    other_headers: dict[str, str],
    db_session,
) -> None:
    test_post.empathy_count = 17
    db_session.commit()

    response = client.post(f"/api/v1/empathy/{test_post.id}", headers=other_headers)

    assert response.json()["empathy_count"] == 1
    db_session.refresh(test_post)
    assert test_post.empathy_count == 1


class TestThreshold:
    @pytest.fixture()
    def near_threshold(self, make_user, test_post: Post, db_session) -> Post:
        """Give the post one empathy less than the threshold."""
        for _ in range(settings.empathy_threshold - 1):
            user = make_user()
            db_session.add(Empathy(user_id=user.id, post_id=test_post.id))
        test_post.empathy_count = settings.empathy_threshold - 1
        db_session.commit()
        return test_post

    def test_threshold_fires_once_and_escalates(
        self,
        client: TestClient,
        near_threshold: Post,
        test_user: User,
        owner_user: User,
        make_user,
        headers_for,
        db_session,
    ) -> None:
        response = client.post(
            f"/api/v1/empathy/{near_threshold.id}", headers=headers_for(make_user())
        )
        assert response.json()["empathy_count"] == settings.empathy_threshold

        events = db_session.query(EmpathyThresholdEvent).all()
        assert len(events) == 1
        assert events[0].post_id == near_threshold.id
        assert events[0].threshold_reached == settings.empathy_threshold
        assert events[0].notification_sent is True

        reached = _notices(db_session, test_user, NotificationType.EMPATHY_THRESHOLD_REACHED)
        assert len(reached) == 1

        escalations = _notices(db_session, owner_user, NotificationType.ADMIN_NOTICE)
        assert len(escalations) == 1
        assert f"#{near_threshold.id}" in escalations[0].content
        assert near_threshold.content[:50] in escalations[0].content

        # The threshold count is also a multiple of the sampling interval.
        sampled = _notices(db_session, test_user, NotificationType.EMPATHY_ON_POST)
        assert len(sampled) == 1

        response = client.post(
            f"/api/v1/empathy/{near_threshold.id}", headers=headers_for(make_user())
        )
        assert response.json()["empathy_count"] == settings.empathy_threshold + 1
        assert db_session.query(EmpathyThresholdEvent).count() == 1
        assert len(_notices(db_session, owner_user, NotificationType.ADMIN_NOTICE)) == 1

    def test_recrossing_threshold_does_not_fire_again(
        self,
        client: TestClient,
        near_threshold: Post,
        owner_user: User,
        make_user,
        headers_for,
        db_session,
    ) -> None:
        headers = headers_for(make_user())
        client.post(f"/api/v1/empathy/{near_threshold.id}", headers=headers)
        client.delete(f"/api/v1/empathy/{near_threshold.id}", headers=headers)
        client.post(f"/api/v1/empathy/{near_threshold.id}", headers=headers)

        assert db_session.query(EmpathyThresholdEvent).count() == 1
        assert len(_notices(db_session, owner_user, NotificationType.ADMIN_NOTICE)) == 1

    def test_threshold_without_owner_account_still_records_event(
        self,
        client: TestClient,
        near_threshold: Post,
        test_user: User,
        make_user,
        headers_for,
        db_session,
    ) -> None:
        response = client.post(
            f"/api/v1/empathy/{near_threshold.id}", headers=headers_for(make_user())
        )

        assert response.status_code == status.HTTP_200_OK
        assert db_session.query(EmpathyThresholdEvent).count() == 1
        assert db_session.query(Notification).filter(
            Notification.type == NotificationType.ADMIN_NOTICE
        ).count() == 0
        assert len(
            _notices(db_session, test_user, NotificationType.EMPATHY_THRESHOLD_REACHED)
        ) == 1
