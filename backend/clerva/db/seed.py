from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from clerva.core.security import get_password_hash
from clerva.db.session import SessionLocal
from clerva.models.achievement import Achievement, UserAchievement
from clerva.models.goal import Goal, GoalCategory
from clerva.models.study_session import SessionParticipant, SessionStatus, StudySession
from clerva.models.subject import SkillLevel, Subject, UserSubject
from clerva.models.user import User

DEMO_EMAIL = "demo@clerva.app"

SUBJECT_CATALOG = [
    ("Calculus", "Mathematics", "Limits, derivatives, integrals and series"),
    ("Linear Algebra", "Mathematics", "Vectors, matrices and linear maps"),
    ("Statistics", "Mathematics", "Probability, inference and regression"),
    ("Physics", "Science", "Mechanics, electromagnetism and waves"),
    ("Chemistry", "Science", "Atomic structure, bonding and reactions"),
    ("Biology", "Science", "Cells, genetics and evolution"),
    ("Computer Science", "Technology", "Algorithms, data structures and programming"),
    ("Data Science", "Technology", "Data analysis, visualization and machine learning"),
    ("World History", "Humanities", "Civilizations and turning points"),
    ("Philosophy", "Humanities", "Logic, ethics and metaphysics"),
    ("English Literature", "Languages", "Novels, poetry and critical reading"),
    ("Spanish", "Languages", "Grammar, vocabulary and conversation"),
    ("Economics", "Social Sciences", "Micro and macroeconomic principles"),
    ("Psychology", "Social Sciences", "Cognition, behavior and development"),
]

ACHIEVEMENT_CATALOG = [
    ("First Steps", "Added your first subject", "subjects", 10),
    ("Goal Setter", "Created your first goal", "goals", 15),
    ("Goal Crusher", "Completed five goals", "goals", 50),
    ("Team Player", "Joined your first study session", "sessions", 20),
    ("Marathoner", "Studied for ten hours in sessions", "sessions", 75),
    ("On Fire", "Reached a seven-day streak", "streak", 100),
]


def seed_catalog(db: Session) -> None:
    existing_subjects = {name for (name,) in db.query(Subject.name).all()}
    db.add_all(
        Subject(name=name, category=category, description=description)
        for name, category, description in SUBJECT_CATALOG
        if name not in existing_subjects
    )
    existing_achievements = {name for (name,) in db.query(Achievement.name).all()}
    db.add_all(
        Achievement(name=name, description=description, category=category, points=points)
        for name, description, category, points in ACHIEVEMENT_CATALOG
        if name not in existing_achievements
    )
    db.commit()


def seed_demo_data(db: Session) -> None:
    seed_catalog(db)
    if db.query(User).filter(User.email == DEMO_EMAIL).first():
        return

    user = User(
        email=DEMO_EMAIL,
        name="Demo Student",
        hashed_password=get_password_hash("Password123"),
        timezone="America/New_York",
        learning_style="visual",
        total_points=45,
        current_streak=2,
    )
    db.add(user)
    db.flush()

    subjects = {s.name: s for s in db.query(Subject).all()}
    db.add_all(
        [
            UserSubject(user_id=user.id, subject_id=subjects["Calculus"].id, skill_level=SkillLevel.INTERMEDIATE),
            UserSubject(user_id=user.id, subject_id=subjects["Physics"].id, skill_level=SkillLevel.BEGINNER),
            UserSubject(user_id=user.id, subject_id=subjects["Computer Science"].id, skill_level=SkillLevel.ADVANCED),
        ]
    )

    now = datetime.utcnow()
    db.add_all(
        [
            Goal(
                user_id=user.id,
                title="Study 20 hours this month",
                category=GoalCategory.STUDY_HOURS,
                target_value=20,
                current_value=6.5,
                unit="hours",
                deadline=now + timedelta(days=21),
            ),
            Goal(
                user_id=user.id,
                title="Finish calculus problem sets",
                category=GoalCategory.ASSIGNMENTS,
                target_value=8,
                current_value=3,
                unit="problem sets",
                deadline=now + timedelta(days=10),
            ),
        ]
    )

    first_steps = db.query(Achievement).filter(Achievement.name == "First Steps").first()
    db.add(UserAchievement(user_id=user.id, achievement_id=first_steps.id))

    day_start = now.replace(hour=14, minute=0, second=0, microsecond=0)
    for day_offset, subject_name, status in (
        (-2, "Calculus", SessionStatus.COMPLETED),
        (-1, "Physics", SessionStatus.COMPLETED),
        (1, "Calculus", SessionStatus.SCHEDULED),
        (3, "Computer Science", SessionStatus.SCHEDULED),
    ):
        start = day_start + timedelta(days=day_offset)
        session = StudySession(
            creator_id=user.id,
            subject_id=subjects[subject_name].id,
            title=f"{subject_name} review",
            start_time=start,
            end_time=start + timedelta(minutes=90),
            location="Library, room 2B" if day_offset % 2 else None,
            is_virtual=day_offset % 2 == 0,
            status=status,
        )
        session.participants.append(SessionParticipant(user_id=user.id))
        db.add(session)
    db.commit()


if __name__ == "__main__":
    with SessionLocal() as session:
        seed_demo_data(session)
