from datetime import datetime, timedelta

import pytest

from clerva.models.study_session import SessionParticipant, SessionStatus, StudySession
from clerva.services.dashboard import study_score
from clerva.services.timefmt import format_duration, format_session_time


def _session(db, creator, start, *, minutes=90, status=SessionStatus.SCHEDULED, participants=()):
    session = StudySession(
        creator_id=creator.id,
        title="Group review",
        start_time=start,
        end_time=start + timedelta(minutes=minutes),
        status=status,
    )
    for person in (creator, *participants):
        session.participants.append(SessionParticipant(user_id=person.id))
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


@pytest.mark.parametrize(
    ("start", "tz", "now", "expected"),
    [
        (datetime(2024, 3, 18, 15, 5), "UTC", datetime(2024, 3, 18, 9, 0), "Today, 3:05 PM"),
        (datetime(2024, 3, 19, 9, 0), "UTC", datetime(2024, 3, 18, 22, 0), "Tomorrow, 9:00 AM"),
        (datetime(2024, 3, 18, 15, 5), "UTC", datetime(2024, 3, 10, 9, 0), "Mon, Mar 18, 3:05 PM"),
        (datetime(2024, 3, 18, 0, 5), "UTC", datetime(2024, 3, 1), "Mon, Mar 18, 12:05 AM"),
        # 02:30 UTC is still the previous evening in New York
        (datetime(2024, 3, 18, 2, 30), "America/New_York", datetime(2024, 3, 1), "Sun, Mar 17, 10:30 PM"),
        (datetime(2024, 3, 18, 15, 5), "Not/AZone", datetime(2024, 3, 18, 9, 0), "Today, 3:05 PM"),
        (datetime(2024, 3, 18, 15, 5), "America", datetime(2024, 3, 18, 9, 0), "Today, 3:05 PM"),
    ],
)
def test_format_session_time(start, tz, now, expected):
    assert format_session_time(start, tz, now) == expected


def test_format_duration():
    start = datetime(2024, 3, 18, 9, 0)
    assert format_duration(start, start + timedelta(minutes=90)) == "1.5 hours"
    assert format_duration(start, start + timedelta(hours=1)) == "1 hours"
    assert format_duration(start, start + timedelta(hours=2)) == "2 hours"


def test_study_score_is_capped():
    assert study_score(0, 0, 0, 0) == 0
    assert study_score(upcoming_sessions=2, completed_sessions=3, completed_goals=1, current_streak=1) == 45
    assert study_score(50, 50, 50, 50) == 100


def test_create_session_adds_creator(client, db_session, user, user_headers):
    start = datetime.utcnow() + timedelta(days=1)
    response = client.post(
        "/api/sessions",
        json={
            "title": "Exam prep",
            "start_time": start.isoformat(),
            "end_time": (start + timedelta(hours=2)).isoformat(),
            "is_virtual": True,
        },
        headers=user_headers,
    )
    assert response.status_code == 201
    session = db_session.get(StudySession, response.json()["id"])
    assert [p.user_id for p in session.participants] == [user.id]
    assert session.status == SessionStatus.SCHEDULED


def test_create_session_requires_end_after_start(client, user_headers):
    start = datetime.utcnow() + timedelta(days=1)
    response = client.post(
        "/api/sessions",
        json={"title": "Backwards", "start_time": start.isoformat(), "end_time": start.isoformat()},
        headers=user_headers,
    )
    assert response.status_code == 400


def test_dashboard_sessions(client, db_session, user, user_headers):
    soon = datetime.utcnow() + timedelta(hours=2)
    _session(db_session, user, soon)
    _session(db_session, user, soon - timedelta(days=3), status=SessionStatus.COMPLETED)
    for day in range(1, 7):
        _session(db_session, user, soon + timedelta(days=day))

    body = client.get("/api/dashboard/sessions", headers=user_headers).json()
    assert len(body) == 5
    first = body[0]
    assert first["duration"] == "1.5 hours"
    assert first["type"] == "in-person"
    assert first["location"] == "TBD"
    assert first["subject"] == "General"
    assert first["participants"] == 1


def test_dashboard_stats(client, db_session, user, user_headers):
    now = datetime.utcnow()
    _session(db_session, user, now + timedelta(days=1))
    _session(db_session, user, now - timedelta(days=2), minutes=120, status=SessionStatus.COMPLETED)
    user.current_streak = 1
    user.total_points = 40
    db_session.commit()

    body = client.get("/api/dashboard/stats", headers=user_headers).json()
    assert body["upcoming_sessions"] == 1
    assert body["completed_sessions"] == 1
    assert body["study_hours"] == 2.0
    assert body["total_points"] == 40
    assert body["study_score"] == 10 + 5 + 2


def test_join_adds_participant_and_starts_session(client, db_session, user, founder, user_headers):
    session = _session(db_session, founder, datetime.utcnow() - timedelta(minutes=5))
    response = client.post(f"/api/sessions/{session.id}/join", headers=user_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["session"]["participants"] == 2
    assert body["session"]["status"] == "in_progress"


def test_join_within_window_keeps_scheduled(client, db_session, user, founder, user_headers):
    session = _session(db_session, founder, datetime.utcnow() + timedelta(minutes=10))
    body = client.post(f"/api/sessions/{session.id}/join", headers=user_headers).json()
    assert body["session"]["status"] == "scheduled"


def test_join_too_early(client, db_session, founder, user_headers):
    session = _session(db_session, founder, datetime.utcnow() + timedelta(hours=1))
    response = client.post(f"/api/sessions/{session.id}/join", headers=user_headers)
    assert response.status_code == 400


def test_join_closed_session(client, db_session, founder, user_headers):
    session = _session(db_session, founder, datetime.utcnow(), status=SessionStatus.CANCELLED)
    assert client.post(f"/api/sessions/{session.id}/join", headers=user_headers).status_code == 404
    assert client.post("/api/sessions/999/join", headers=user_headers).status_code == 404


def test_cancel_with_others_only_leaves(client, db_session, user, founder, user_headers):
    session = _session(db_session, user, datetime.utcnow() + timedelta(days=1), participants=[founder])
    response = client.post(f"/api/sessions/{session.id}/cancel", headers=user_headers)
    assert response.status_code == 200
    assert response.json()["notified_participants"] == 1

    db_session.expire_all()
    session = db_session.get(StudySession, session.id)
    assert session.status == SessionStatus.SCHEDULED
    assert [p.user_id for p in session.participants] == [founder.id]


def test_cancel_alone_cancels_session(client, db_session, user, user_headers):
    session = _session(db_session, user, datetime.utcnow() + timedelta(days=1))
    response = client.post(f"/api/sessions/{session.id}/cancel", headers=user_headers)
    assert response.json()["notified_participants"] == 0

    db_session.expire_all()
    assert db_session.get(StudySession, session.id).status == SessionStatus.CANCELLED


def test_cancel_requires_participation(client, db_session, founder, user_headers):
    session = _session(db_session, founder, datetime.utcnow() + timedelta(days=1))
    assert client.post(f"/api/sessions/{session.id}/cancel", headers=user_headers).status_code == 404
