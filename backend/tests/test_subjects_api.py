import pytest

from clerva.models.subject import Subject, UserSubject


@pytest.fixture()
def catalog(db_session):
    subjects = [
        Subject(name="Calculus", category="Mathematics"),
        Subject(name="Algebra", category="Mathematics"),
        Subject(name="Biology", category="Science"),
    ]
    db_session.add_all(subjects)
    db_session.commit()
    return {subject.name: subject for subject in subjects}


def test_catalog_is_public_and_ordered(client, catalog):
    body = client.get("/api/subjects").json()
    assert [s["name"] for s in body["subjects"]] == ["Algebra", "Calculus", "Biology"]
    assert body["categories"] == [
        {"name": "Mathematics", "count": 2},
        {"name": "Science", "count": 1},
    ]
    assert body["total_subjects"] == 3


def test_catalog_filters_by_category(client, catalog):
    body = client.get("/api/subjects?category=Science").json()
    assert [s["name"] for s in body["subjects"]] == ["Biology"]


def test_catalog_counts_active_learners(client, db_session, catalog, user, founder):
    db_session.add_all(
        [
            UserSubject(user_id=user.id, subject_id=catalog["Biology"].id),
            UserSubject(user_id=founder.id, subject_id=catalog["Biology"].id, is_active=False),
        ]
    )
    db_session.commit()
    body = client.get("/api/subjects?category=Science").json()
    assert body["subjects"][0]["user_count"] == 1


def test_user_subjects_requires_session(client, catalog):
    assert client.get("/api/subjects?user_subjects=true").status_code == 401


def test_add_and_list_user_subject(client, db_session, catalog, user, user_headers):
    response = client.post(
        "/api/subjects",
        json={"subject_id": catalog["Calculus"].id, "skill_level": "advanced"},
        headers=user_headers,
    )
    assert response.status_code == 201
    assert response.json()["user_subject"]["skill_level"] == "advanced"

    mine = client.get("/api/subjects?user_subjects=true", headers=user_headers).json()
    assert [s["name"] for s in mine["subjects"]] == ["Calculus"]

    db_session.refresh(user)
    assert user.total_points == 10


def test_add_unknown_subject(client, user_headers):
    response = client.post("/api/subjects", json={"subject_id": 999}, headers=user_headers)
    assert response.status_code == 404


def test_add_duplicate_subject(client, catalog, user_headers):
    payload = {"subject_id": catalog["Calculus"].id}
    client.post("/api/subjects", json=payload, headers=user_headers)
    response = client.post("/api/subjects", json=payload, headers=user_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Subject already added"}


def test_remove_then_reactivate(client, db_session, catalog, user, user_headers):
    subject_id = catalog["Biology"].id
    client.post("/api/subjects", json={"subject_id": subject_id}, headers=user_headers)

    removed = client.delete(f"/api/subjects?subject_id={subject_id}", headers=user_headers)
    assert removed.status_code == 200
    link = db_session.query(UserSubject).filter_by(user_id=user.id, subject_id=subject_id).one()
    db_session.refresh(link)
    assert link.is_active is False
    assert link.last_studied is not None

    again = client.post("/api/subjects", json={"subject_id": subject_id}, headers=user_headers)
    assert again.status_code == 200
    assert again.json()["message"] == "Subject reactivated successfully"
    db_session.refresh(user)
    assert user.total_points == 20


def test_remove_validation(client, catalog, user_headers):
    assert client.delete("/api/subjects", headers=user_headers).status_code == 400
    missing = client.delete(f"/api/subjects?subject_id={catalog['Calculus'].id}", headers=user_headers)
    assert missing.status_code == 404


def test_active_subject_limit(client, db_session, user, user_headers):
    extra = [Subject(name=f"Subject {i}", category="General") for i in range(16)]
    db_session.add_all(extra)
    db_session.commit()
    db_session.add_all(UserSubject(user_id=user.id, subject_id=s.id) for s in extra[:15])
    db_session.commit()

    response = client.post("/api/subjects", json={"subject_id": extra[15].id}, headers=user_headers)
    assert response.status_code == 403
