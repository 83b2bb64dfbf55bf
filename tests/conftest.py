"""
Shared fixtures: an app per test on a fresh in-memory SQLite database and
a zero-delay mock provider.
"""
import pytest
from fastapi.testclient import TestClient

from content_agent.db.init_db import init_db
from content_agent.db.models.user import User
from content_agent.llm.mock_provider import MockProvider
from content_agent.llm.provider import ProviderError
from content_agent.main import create_app
from content_agent.services import auth_service


class RecordingProvider(MockProvider):
    """Mock provider that counts calls and can be told to fail."""

    def __init__(self):
        super().__init__(delay_min=0, delay_max=0)
        self.chat_calls = 0
        self.image_calls = 0
        self.fail = False

    def chat(self, messages, model="mock-text", temperature=0.7, max_tokens=None, **kwargs):
        self.chat_calls += 1
        if self.fail:
            raise ProviderError("upstream unavailable")
        return super().chat(messages, model=model, temperature=temperature, max_tokens=max_tokens, **kwargs)

    def generate_image(self, prompt, model="mock-image", size="1024x1024", quality="standard", **kwargs):
        self.image_calls += 1
        if self.fail:
            raise ProviderError("upstream unavailable")
        return super().generate_image(prompt, model=model, size=size, quality=quality, **kwargs)


@pytest.fixture
def provider():
    return RecordingProvider()


@pytest.fixture
def app(provider):
    return create_app(database_url="sqlite://", llm_provider=provider, run_migrations=False)


@pytest.fixture
def client(app):
    """Test client; entering it runs the startup that creates the schema."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(app):
    """Provide a database session on the app's database."""
    init_db(app.state.engine)
    session = app.state.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def registered_user(db):
    """(token, user) for a fresh free-plan user with a Personal Workspace."""
    return auth_service.register(db, "jane@example.com", "SecurePass123", "Jane", "Doe")


@pytest.fixture
def test_user(registered_user) -> User:
    return registered_user[1]


@pytest.fixture
def auth_headers(registered_user):
    return {"Authorization": f"Bearer {registered_user[0]}"}


@pytest.fixture
def other_user_headers(db):
    token, _ = auth_service.register(db, "mallory@example.com", "OtherPass123", "Mallory", "Smith")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def set_plan(db):
    """Move a user to another plan directly in the database."""
    def _set_plan(user: User, plan: str) -> None:
        user.subscription_plan = plan
        db.commit()
    return _set_plan
