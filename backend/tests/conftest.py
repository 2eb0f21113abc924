import os

# Settings are read once and cached, so the environment must be set before
# anything under clerva is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "test"
os.environ["AI_PROVIDER"] = "openai"
os.environ["OPENAI_API_KEY"] = ""
os.environ["FOUNDER_EMAILS"] = "founder@clerva.app"
os.environ["ADMIN_EMAILS"] = "admin@clerva.app"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from clerva.ai.factory import get_ai_adapter
from clerva.ai.openai_adapter import OpenAIStudyAdapter
from clerva.core.config import get_settings
from clerva.core.security import create_access_token, get_password_hash
from clerva.db.base import Base
from clerva.db.session import get_db
from clerva.main import create_app
from clerva.models.user import User

DEFAULT_PASSWORD = "Password123"


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine):
    session = sessionmaker(bind=engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def app(db_session):
    app = create_app()

    def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_ai_adapter] = lambda: OpenAIStudyAdapter(api_key=None)
    return app


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def override_settings(monkeypatch):
    """Swap environment values and rebuild the cached settings and AI adapter."""

    def _apply(**env):
        for name, value in env.items():
            monkeypatch.setenv(name, value)
        get_settings.cache_clear()
        get_ai_adapter.cache_clear()

    yield _apply
    get_settings.cache_clear()
    get_ai_adapter.cache_clear()


def create_user(db, email: str, password: str = DEFAULT_PASSWORD, **fields) -> User:
    user = User(
        email=email,
        name=fields.pop("name", email.split("@")[0].title()),
        hashed_password=get_password_hash(password),
        **fields,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def user(db_session):
    return create_user(db_session, "student@example.com")


@pytest.fixture()
def user_headers(user):
    return auth_headers(user)


@pytest.fixture()
def founder(db_session):
    return create_user(db_session, "founder@clerva.app", name="Founder")


@pytest.fixture()
def founder_headers(founder):
    return auth_headers(founder)


@pytest.fixture()
def admin(db_session):
    return create_user(db_session, "admin@clerva.app", name="Admin")


@pytest.fixture()
def admin_headers(admin):
    return auth_headers(admin)
