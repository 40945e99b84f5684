# tests/v1/test_admin.py
"""Tests for admin status handling and the audit log."""

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from dongne_board.models import AdminLog, AdminStatus, Notification, NotificationType, Post, User


def test_non_admin_cannot_change_status(
    client: TestClient, test_post: Post, other_headers: dict[str, str], db_session
) -> None:
    response = client.patch(
        f"/api/v1/admin/posts/{test_post.id}/status",
        json={"status": "completed"},
        headers=other_headers,
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN
    db_session.refresh(test_post)
    assert test_post.admin_status == AdminStatus.PENDING
    assert db_session.query(AdminLog).count() == 0


def test_anonymous_cannot_change_status(client: TestClient, test_post: Post) -> None:
    response = client.patch(
        f"/api/v1/admin/posts/{test_post.id}/status", json={"status": "completed"}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_admin_changes_status(
    client: TestClient,
    test_post: Post,
    test_user: User,
    admin_user: User,
    admin_headers: dict[str, str],
    db_session,
) -> None:
    response = client.patch(
        f"/api/v1/admin/posts/{test_post.id}/status",
        json={"status": "in_progress", "notes": "구청에 전달했습니다"},
        headers=admin_headers,
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True}

    db_session.refresh(test_post)
    assert test_post.admin_status == AdminStatus.IN_PROGRESS
    assert test_post.admin_notes == "구청에 전달했습니다"

    log = db_session.query(AdminLog).one()
    assert log.admin_id == admin_user.id
    assert log.action == "update_status"
    assert log.target_type == "post"
    assert log.target_id == test_post.id
    assert log.details == {
        "status": "in_progress",
        "notes": "구청에 전달했습니다",
        "previous_status": "pending",
    }

    notice = db_session.query(Notification).filter(Notification.user_id == test_user.id).one()
    assert notice.type == NotificationType.POST_STATUS_CHANGED
    assert "행정 처리 중" in notice.content


def test_status_without_notes_keeps_existing_notes(
    client: TestClient, make_post, test_user: User, admin_headers: dict[str, str], db_session
) -> None:
    post = make_post(test_user, admin_notes="기존 메모")

    client.patch(
        f"/api/v1/admin/posts/{post.id}/status",
        json={"status": "completed"},
        headers=admin_headers,
    )

    db_session.refresh(post)
    assert post.admin_status == AdminStatus.COMPLETED
    assert post.admin_notes == "기존 메모"


@pytest.mark.parametrize("final_status", ["pending", "rejected"])
def test_any_status_can_replace_any_other(
    client: TestClient,
    make_post,
    test_user: User,
    admin_headers: dict[str, str],
    final_status: str,
    db_session,
) -> None:
    post = make_post(test_user, admin_status=AdminStatus.COMPLETED)

    response = client.patch(
        f"/api/v1/admin/posts/{post.id}/status",
        json={"status": final_status},
        headers=admin_headers,
    )

    assert response.status_code == status.HTTP_200_OK
    db_session.refresh(post)
    assert post.admin_status == AdminStatus(final_status)


def test_admin_on_own_post_is_not_notified(
    client: TestClient, make_post, admin_user: User, admin_headers: dict[str, str], db_session
) -> None:
    post = make_post(admin_user)

    client.patch(
        f"/api/v1/admin/posts/{post.id}/status",
        json={"status": "completed"},
        headers=admin_headers,
    )

    assert db_session.query(Notification).count() == 0
    assert db_session.query(AdminLog).count() == 1


def test_missing_post_returns_404(
    client: TestClient, admin_headers: dict[str, str], db_session
) -> None:
    response = client.patch(
        "/api/v1/admin/posts/99999/status",
        json={"status": "completed"},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert db_session.query(AdminLog).count() == 0


def test_invalid_status_rejected(
    client: TestClient, test_post: Post, admin_headers: dict[str, str]
) -> None:
    response = client.patch(
        f"/api/v1/admin/posts/{test_post.id}/status",
        json={"status": "archived"},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_admin_logs_listing(
    client: TestClient,
    test_post: Post,
    admin_headers: dict[str, str],
    other_headers: dict[str, str],
) -> None:
    for new_status in ("in_progress", "completed"):
        client.patch(
            f"/api/v1/admin/posts/{test_post.id}/status",
            json={"status": new_status},
            headers=admin_headers,
        )

    response = client.get("/api/v1/admin/logs", headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK
    logs = response.json()
    assert [log["details"]["status"] for log in logs] == ["completed", "in_progress"]
    assert logs[0]["details"]["previous_status"] == "in_progress"

    forbidden = client.get("/api/v1/admin/logs", headers=other_headers)
    assert forbidden.status_code == status.HTTP_403_FORBIDDEN
