from datetime import datetime, timedelta

import pytest

from clerva.models.calendar_event import CalendarEvent, EventType
from clerva.models.goal import Goal
from clerva.models.study_session import SessionParticipant, SessionStatus, StudySession
from clerva.services.calendar import parse_item_id

from conftest import auth_headers, create_user

START = datetime(2030, 5, 6, 9, 0)


def _event(db, owner, **fields):
    event = CalendarEvent(
        user_id=owner.id,
        title=fields.pop("title", "Chemistry exam"),
        start_time=fields.pop("start_time", START),
        end_time=fields.pop("end_time", START + timedelta(hours=2)),
        event_type=fields.pop("event_type", EventType.EXAM),
        **fields,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


def _session(db, creator, *, participants=(), start=START):
    session = StudySession(
        creator_id=creator.id,
        title="Group review",
        start_time=start,
        end_time=start + timedelta(hours=1),
    )
    for person in (creator, *participants):
        session.participants.append(SessionParticipant(user_id=person.id))
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def _goal(db, owner, deadline=START):
    goal = Goal(user_id=owner.id, title="Finish lab report", deadline=deadline)
    db.add(goal)
    db.commit()
    db.refresh(goal)
    return goal


@pytest.mark.parametrize(
    ("item_id", "expected"),
    [("event-3", ("event", 3)), ("session-12", ("session", 12)), ("goal-1", ("goal", 1))],
)
def test_parse_item_id(item_id, expected):
    assert parse_item_id(item_id) == expected


@pytest.mark.parametrize("item_id", ["message-3", "event-", "event-abc", "12"])
def test_parse_item_id_rejects_unknown(item_id):
    with pytest.raises(ValueError):
        parse_item_id(item_id)


def test_calendar_merges_sources_in_time_order(client, db_session, user, user_headers):
    _event(db_session, user, start_time=START + timedelta(days=2), end_time=START + timedelta(days=2, hours=1))
    _session(db_session, user, start=START + timedelta(days=1))
    _goal(db_session, user, deadline=START)
    _goal(db_session, user, deadline=None)

    response = client.get("/api/calendar/events", headers=user_headers)
    assert response.status_code == 200
    items = response.json()
    assert [item["source"] for item in items] == ["goal", "study_session", "personal"]
    assert items[0]["title"] == "Goal: Finish lab report"
    assert items[0]["is_all_day"] is True
    assert items[1]["participants"] == [user.name]
    assert items[2]["color"] == "#EF4444"


def test_calendar_applies_range_only_with_both_ends(client, db_session, user, user_headers):
    _event(db_session, user, title="Inside")
    _event(
        db_session,
        user,
        title="Outside",
        start_time=START + timedelta(days=30),
        end_time=START + timedelta(days=30, hours=1),
    )

    ranged = client.get(
        "/api/calendar/events",
        params={"start": START.isoformat(), "end": (START + timedelta(days=1)).isoformat()},
        headers=user_headers,
    ).json()
    assert [item["title"] for item in ranged] == ["Inside"]

    half_open = client.get(
        "/api/calendar/events", params={"start": START.isoformat()}, headers=user_headers
    ).json()
    assert len(half_open) == 2


def test_calendar_is_private_to_owner(client, db_session, user_headers):
    other = create_user(db_session, "other@example.com")
    _event(db_session, other)
    _goal(db_session, other)
    assert client.get("/api/calendar/events", headers=user_headers).json() == []


def test_create_event(client, db_session, user, user_headers):
    response = client.post(
        "/api/calendar/events",
        json={
            "title": "  Library  ",
            "start_time": START.isoformat(),
            "end_time": (START + timedelta(hours=3)).isoformat(),
            "type": "study_session",
        },
        headers=user_headers,
    )
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["event"]["title"] == "Library"
    assert body["event"]["id"].startswith("event-")
    assert body["event"]["color"] == "#3B82F6"
    assert db_session.query(CalendarEvent).filter(CalendarEvent.user_id == user.id).count() == 1


def test_create_event_requires_end_after_start(client, user_headers):
    response = client.post(
        "/api/calendar/events",
        json={
            "title": "Backwards",
            "start_time": START.isoformat(),
            "end_time": START.isoformat(),
            "type": "exam",
        },
        headers=user_headers,
    )
    assert response.status_code == 400
    assert response.json() == {"error": "End time must be after start time"}


def test_create_event_rejects_unknown_type(client, user_headers):
    response = client.post(
        "/api/calendar/events",
        json={
            "title": "Party",
            "start_time": START.isoformat(),
            "end_time": (START + timedelta(hours=1)).isoformat(),
            "type": "party",
        },
        headers=user_headers,
    )
    assert response.status_code == 400


def test_update_event(client, db_session, user, user_headers):
    event = _event(db_session, user)
    response = client.put(
        f"/api/calendar/events/event-{event.id}",
        json={"title": "Moved exam", "type": "meeting"},
        headers=user_headers,
    )
    assert response.status_code == 200
    assert response.json()["event"]["title"] == "Moved exam"
    assert response.json()["event"]["type"] == "meeting"
    db_session.refresh(event)
    assert event.event_type == EventType.MEETING


def test_update_checks_merged_times(client, db_session, user, user_headers):
    event = _event(db_session, user)
    response = client.put(
        f"/api/calendar/events/event-{event.id}",
        json={"start_time": (START + timedelta(hours=5)).isoformat()},
        headers=user_headers,
    )
    assert response.status_code == 400
    assert response.json() == {"error": "End time must be after start time"}


def test_update_session_changes_schedule_only(client, db_session, user, user_headers):
    session = _session(db_session, user)
    new_start = START + timedelta(days=1)
    response = client.put(
        f"/api/calendar/events/session-{session.id}",
        json={
            "title": "Ignored",
            "start_time": new_start.isoformat(),
            "end_time": (new_start + timedelta(hours=1)).isoformat(),
            "location": "Room 4",
        },
        headers=user_headers,
    )
    assert response.status_code == 200
    db_session.refresh(session)
    assert session.start_time == new_start
    assert session.location == "Room 4"
    assert session.title == "Group review"


def test_update_goal_moves_deadline(client, db_session, user, user_headers):
    goal = _goal(db_session, user)
    new_deadline = START + timedelta(days=3)
    response = client.put(
        f"/api/calendar/events/goal-{goal.id}",
        json={"start_time": new_deadline.isoformat(), "title": "Submit lab report"},
        headers=user_headers,
    )
    assert response.status_code == 200
    db_session.refresh(goal)
    assert goal.deadline == new_deadline
    assert goal.title == "Submit lab report"

    no_deadline = client.put(
        f"/api/calendar/events/goal-{goal.id}", json={"title": "Again"}, headers=user_headers
    )
    assert no_deadline.status_code == 400


def test_update_rejects_bad_ids(client, db_session, user_headers):
    bad = client.put("/api/calendar/events/message-1", json={}, headers=user_headers)
    assert bad.status_code == 400
    assert bad.json() == {"error": "Invalid event type"}

    other = create_user(db_session, "other@example.com")
    foreign = _event(db_session, other)
    denied = client.put(
        f"/api/calendar/events/event-{foreign.id}", json={"title": "Mine now"}, headers=user_headers
    )
    assert denied.status_code == 404


def test_delete_event_and_goal(client, db_session, user, user_headers):
    event = _event(db_session, user)
    goal = _goal(db_session, user)
    event_id, goal_id = event.id, goal.id

    assert client.delete(f"/api/calendar/events/event-{event_id}", headers=user_headers).status_code == 200
    assert client.delete(f"/api/calendar/events/goal-{goal_id}", headers=user_headers).status_code == 200
    db_session.expire_all()
    assert db_session.get(CalendarEvent, event_id) is None
    assert db_session.get(Goal, goal_id) is None


def test_delete_session_cancels_for_creator(client, db_session, user, user_headers):
    session = _session(db_session, user)
    response = client.delete(f"/api/calendar/events/session-{session.id}", headers=user_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Session cancelled successfully"
    db_session.refresh(session)
    assert session.status == SessionStatus.CANCELLED


def test_delete_session_leaves_for_participant(client, db_session, user):
    creator = create_user(db_session, "creator@example.com")
    session = _session(db_session, creator, participants=[user])
    response = client.delete(
        f"/api/calendar/events/session-{session.id}", headers=auth_headers(user)
    )
    assert response.status_code == 200
    assert response.json()["message"] == "You have left the session"
    db_session.refresh(session)
    assert session.status == SessionStatus.SCHEDULED
    assert [p.user_id for p in session.participants] == [creator.id]


def test_calendar_requires_auth(client):
    assert client.get("/api/calendar/events").status_code == 401
