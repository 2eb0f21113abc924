from clerva.models.achievement import Achievement, UserAchievement
from clerva.models.goal import Goal, GoalStatus
from clerva.models.subject import Subject, UserSubject
from clerva.models.user import User

from conftest import DEFAULT_PASSWORD


def test_profile_bundle(client, db_session, user, user_headers):
    subject = Subject(name="Physics", category="Science")
    badge = Achievement(name="First Steps", category="subjects", points=10)
    db_session.add_all([subject, badge])
    db_session.flush()
    db_session.add_all(
        [
            UserSubject(user_id=user.id, subject_id=subject.id),
            UserAchievement(user_id=user.id, achievement_id=badge.id),
            Goal(user_id=user.id, title="Active", target_value=4, current_value=1),
            Goal(user_id=user.id, title="Done", target_value=1, current_value=1, status=GoalStatus.COMPLETED),
        ]
    )
    db_session.commit()

    body = client.get("/api/user/profile", headers=user_headers).json()
    assert body["profile"]["email"] == user.email
    assert "hashed_password" not in body["profile"]
    assert [s["name"] for s in body["subjects"]] == ["Physics"]
    assert body["achievements"][0]["name"] == "First Steps"
    assert [g["title"] for g in body["goals"]] == ["Active"]
    assert body["goals"][0]["progress"] == 25.0
    assert body["stats"] == {"total_study_sessions": 0, "active_goals": 1, "achievements": 1}


def test_update_profile(client, user_headers):
    response = client.patch(
        "/api/user/profile",
        json={"bio": "Chemistry nerd", "timezone": "Europe/Berlin", "learning_style": "visual"},
        headers=user_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["bio"] == "Chemistry nerd"
    assert body["timezone"] == "Europe/Berlin"


def test_update_profile_rejects_bad_timezone(client, user_headers):
    for name in ("Mars/Olympus", "America", "../etc"):
        response = client.patch("/api/user/profile", json={"timezone": name}, headers=user_headers)
        assert response.status_code == 400, name


def test_change_password(client, user, user_headers):
    wrong = client.post(
        "/api/user/change-password",
        json={"current_password": "Nope1234", "new_password": "Another123"},
        headers=user_headers,
    )
    assert wrong.status_code == 400

    ok = client.post(
        "/api/user/change-password",
        json={"current_password": DEFAULT_PASSWORD, "new_password": "Another123"},
        headers=user_headers,
    )
    assert ok.status_code == 200
    signin = client.post("/api/auth/signin", json={"email": user.email, "password": "Another123"})
    assert signin.status_code == 200


def test_delete_account_cascades(client, db_session, user, user_headers):
    user_id = user.id
    db_session.add(Goal(user_id=user_id, title="Gone", target_value=1))
    db_session.commit()

    response = client.delete("/api/user/delete-account", headers=user_headers)
    assert response.status_code == 200
    db_session.expire_all()
    assert db_session.get(User, user_id) is None
    assert db_session.query(Goal).count() == 0


def test_change_password_requires_strong_password(client, user, user_headers):
    response = client.post(
        "/api/user/change-password",
        json={"current_password": DEFAULT_PASSWORD, "new_password": "alllowercase"},
        headers=user_headers,
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request data"
    signin = client.post("/api/auth/signin", json={"email": user.email, "password": DEFAULT_PASSWORD})
    assert signin.status_code == 200


def test_update_profile_merges_preferences(client, db_session, user, user_headers):
    user.preferences = {"theme": "dark", "notifications": True}
    db_session.commit()

    response = client.patch(
        "/api/user/profile", json={"preferences": {"theme": "light"}}, headers=user_headers
    )
    assert response.status_code == 200
    assert response.json()["preferences"] == {"theme": "light", "notifications": True}


def test_onboarding_saves_answers(client, db_session, user, user_headers):
    response = client.post(
        "/api/user/onboarding",
        json={
            "completed": True,
            "data": {
                "study_style": "visual",
                "subjects": ["Physics", " "],
                "study_goals": ["exam_prep"],
                "session_duration": 45,
                "grade_level": "Year 2",
            },
        },
        headers=user_headers,
    )
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Onboarding completed successfully"}

    db_session.refresh(user)
    assert user.profile_complete is True
    assert user.learning_style == "visual"
    study = user.preferences["study"]
    assert study["session_duration"] == 45
    assert study["preferred_time"] == "morning"
    assert study["subjects"] == [{"name": "Physics", "level": "intermediate"}]
    assert study["study_goals"]["exam_preparation"] is True
    assert study["availability"]["saturday"]["start"] == "10:00"
    assert user.preferences["onboarding_completed"] is True

    status_body = client.get("/api/user/onboarding", headers=user_headers).json()
    assert status_body["completed"] is True
    assert status_body["data"]["subjects"] == ["Physics"]
    assert status_body["user_profile"]["grade_level"] == "Year 2"


def test_onboarding_skip_keeps_preferences(client, db_session, user, user_headers):
    user.preferences = {"theme": "dark"}
    db_session.commit()
    response = client.post(
        "/api/user/onboarding",
        json={"completed": True, "skipped": True, "data": {"study_style": "auditory"}},
        headers=user_headers,
    )
    assert response.json()["message"] == "Onboarding skipped"
    db_session.refresh(user)
    assert user.profile_complete is True
    assert user.learning_style is None
    assert user.preferences == {"theme": "dark"}


def test_onboarding_status_defaults(client, user_headers):
    body = client.get("/api/user/onboarding", headers=user_headers).json()
    assert body == {
        "completed": False,
        "data": None,
        "user_profile": {
            "learning_style": None,
            "subjects": [],
            "age_group": None,
            "grade_level": None,
            "study_goals": [],
        },
    }


def test_settings_put_merges_top_level(client, db_session, user, user_headers):
    user.preferences = {"theme": "dark", "privacy": {"profile_visibility": "private"}}
    db_session.commit()

    response = client.put(
        "/api/user/settings",
        json={"notifications": {"email": False}, "privacy": {"profile_visibility": "public"}},
        headers=user_headers,
    )
    assert response.status_code == 200
    settings = response.json()["settings"]
    assert settings["theme"] == "dark"
    assert settings["notifications"] == {"email": False}
    assert settings["privacy"] == {"profile_visibility": "private"}
    assert "updated_at" in settings

    assert client.get("/api/user/settings", headers=user_headers).json()["notifications"] == {"email": False}


def test_settings_patch_merges_section(client, db_session, user, user_headers):
    user.preferences = {"appearance": {"theme": "dark", "font": "serif"}}
    db_session.commit()

    response = client.patch(
        "/api/user/settings",
        json={"section": "appearance", "settings": {"theme": "light"}},
        headers=user_headers,
    )
    assert response.status_code == 200
    assert response.json()["settings"]["appearance"] == {"theme": "light", "font": "serif"}


def test_settings_patch_rejects_privacy_section(client, user_headers):
    response = client.patch(
        "/api/user/settings",
        json={"section": "privacy", "settings": {"profile_visibility": "public"}},
        headers=user_headers,
    )
    assert response.status_code == 400

    missing = client.patch("/api/user/settings", json={"settings": {}}, headers=user_headers)
    assert missing.status_code == 400
