from datetime import datetime, timedelta

import pytest

from clerva.models.achievement import Achievement, UserAchievement
from clerva.models.feedback import Feedback, FeedbackPriority, FeedbackType
from clerva.models.study_group import GroupRole, StudyGroup, StudyGroupMember
from clerva.models.study_session import SessionParticipant, SessionStatus, StudySession
from clerva.services.activity import relative_time

from conftest import create_user

NOW = datetime(2024, 3, 18, 12, 0)


@pytest.mark.parametrize(
    ("delta", "expected"),
    [
        (timedelta(seconds=5), "5 seconds ago"),
        (timedelta(minutes=1), "1 minute ago"),
        (timedelta(minutes=12), "12 minutes ago"),
        (timedelta(hours=1, minutes=30), "1 hour ago"),
        (timedelta(hours=5), "5 hours ago"),
        (timedelta(days=2), "2 days ago"),
        (timedelta(days=10), "2024-03-08"),
    ],
)
def test_relative_time(delta, expected):
    assert relative_time(NOW - delta, NOW) == expected


def _session(db, user, *, status, start, created_at=None):
    session = StudySession(
        creator_id=user.id,
        title=f"{status.value} session",
        start_time=start,
        end_time=start + timedelta(hours=1),
        status=status,
    )
    if created_at is not None:
        session.created_at = created_at
    session.participants.append(SessionParticipant(user_id=user.id))
    db.add(session)
    return session


def test_activity_feed_collects_recent_events(client, db_session, user, user_headers):
    now = datetime.utcnow()
    _session(db_session, user, status=SessionStatus.COMPLETED, start=now - timedelta(days=1))
    _session(db_session, user, status=SessionStatus.COMPLETED, start=now - timedelta(days=30))
    _session(db_session, user, status=SessionStatus.SCHEDULED, start=now + timedelta(days=2))
    _session(
        db_session,
        user,
        status=SessionStatus.SCHEDULED,
        start=now + timedelta(days=2),
        created_at=now - timedelta(days=5),
    )
    badge = Achievement(name="Early Bird", category="sessions", points=5)
    group = StudyGroup(name="Night owls")
    group.members.append(StudyGroupMember(user_id=user.id, role=GroupRole.MEMBER))
    db_session.add_all([badge, group])
    db_session.flush()
    db_session.add(UserAchievement(user_id=user.id, achievement_id=badge.id))
    db_session.commit()

    response = client.get("/api/dashboard/activity", headers=user_headers)
    assert response.status_code == 200
    items = response.json()
    assert sorted(item["type"] for item in items) == [
        "achievement",
        "group_joined",
        "session_completed",
        "session_scheduled",
    ]
    timestamps = [item["timestamp"] for item in items]
    assert timestamps == sorted(timestamps, reverse=True)
    achievement = next(item for item in items if item["type"] == "achievement")
    assert achievement["content"] == "Achievement unlocked: Early Bird"
    assert achievement["action_url"] == "/profile"


def test_activity_feed_is_capped(client, db_session, user, user_headers):
    now = datetime.utcnow()
    for _ in range(3):
        _session(db_session, user, status=SessionStatus.COMPLETED, start=now - timedelta(hours=3))
        _session(db_session, user, status=SessionStatus.SCHEDULED, start=now + timedelta(days=1))
    for index in range(3):
        group = StudyGroup(name=f"Group {index}")
        group.members.append(StudyGroupMember(user_id=user.id, role=GroupRole.OWNER))
        db_session.add(group)
    db_session.commit()

    items = client.get("/api/dashboard/activity", headers=user_headers).json()
    # Each source contributes at most two entries
    assert len(items) == 6
    assert sum(item["type"] == "group_joined" for item in items) == 2
    assert all(
        item["content"].startswith("You created") for item in items if item["type"] == "group_joined"
    )


def test_activity_feed_is_empty_without_session(client):
    response = client.get("/api/dashboard/activity")
    assert response.status_code == 200
    assert response.json() == []


def test_admin_recent_activity(client, db_session, founder_headers):
    other = create_user(db_session, "new@example.com")
    create_user(db_session, "old@example.com", created_at=datetime.utcnow() - timedelta(days=30))
    db_session.add_all(
        [
            Feedback(
                user_id=other.id,
                category=FeedbackType.BUG,
                title="Crash on login",
                message="It crashes every time I log in.",
                priority=FeedbackPriority.CRITICAL,
            ),
            StudyGroup(name="Physics club"),
        ]
    )
    db_session.commit()

    response = client.get("/api/admin/recent-activity", headers=founder_headers)
    assert response.status_code == 200
    items = response.json()
    messages = {item["message"]: item["severity"] for item in items}
    assert messages["New user registration: new@example.com"] == "info"
    assert messages["New bug feedback: Crash on login"] == "error"
    assert messages["Study group created: Physics club"] == "success"
    assert "New user registration: old@example.com" not in messages


def test_admin_recent_activity_is_founder_only(client, admin_headers, user_headers):
    assert client.get("/api/admin/recent-activity", headers=user_headers).status_code == 403
    assert client.get("/api/admin/recent-activity", headers=admin_headers).status_code == 403
