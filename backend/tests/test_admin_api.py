from datetime import datetime, timedelta

from clerva.models.feedback import Feedback, FeedbackPriority, FeedbackStatus, FeedbackType
from clerva.models.study_session import SessionStatus, StudySession

from conftest import create_user


def test_list_users_hides_secrets(client, founder_headers, user):
    response = client.get("/api/admin/users", headers=founder_headers)
    assert response.status_code == 200
    body = response.json()
    emails = {u["email"] for u in body["users"]}
    assert emails == {"founder@clerva.app", user.email}
    assert all("hashed_password" not in u for u in body["users"])
    assert body["stats"] == {"total_users": 2, "active_users": 2, "new_users_today": 2}


def test_user_stats(client, db_session, founder, founder_headers):
    create_user(db_session, "old@example.com", created_at=datetime.utcnow() - timedelta(days=30), is_active=False)
    start = datetime.utcnow() - timedelta(days=1)
    db_session.add_all(
        [
            StudySession(creator_id=founder.id, title="A", start_time=start, end_time=start + timedelta(hours=1)),
            StudySession(creator_id=founder.id, title="B", start_time=start, end_time=start + timedelta(hours=2)),
        ]
    )
    db_session.commit()

    body = client.get("/api/admin/user-stats", headers=founder_headers).json()
    assert body["total_users"] == 2
    assert body["active_users"] == 1
    assert body["new_users_today"] == 1
    assert body["new_users_this_week"] == 1
    assert body["average_session_hours"] == 1.5


def test_dashboard_stats(client, db_session, founder, founder_headers):
    start = datetime.utcnow()
    db_session.add_all(
        [
            StudySession(
                creator_id=founder.id,
                title="Done",
                start_time=start,
                end_time=start + timedelta(hours=1),
                status=SessionStatus.COMPLETED,
            ),
            Feedback(
                category=FeedbackType.BUG,
                title="Bug feedback",
                message="crash",
                status=FeedbackStatus.OPEN,
                priority=FeedbackPriority.CRITICAL,
            ),
        ]
    )
    db_session.commit()

    body = client.get("/api/admin/dashboard-stats", headers=founder_headers).json()
    assert body["users"]["total"] == 1
    assert body["content"]["study_sessions"] == 1
    assert body["content"]["completed_sessions"] == 1
    assert body["feedback"] == {"total": 1, "open": 1, "critical": 1}
