import os

# Keep the app's own engine off disk; must run before kendo.settings is imported
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

from kendo.database import get_session, import_models, seed_lookup_tables  # noqa: E402
from kendo.main import app  # noqa: E402
from kendo.rule_presets import StaticRulePresetProvider  # noqa: E402
from kendo.routes.tournaments import get_rule_preset_provider  # noqa: E402

TEST_DATABASE_URL = "sqlite:///:memory:"

# ============================================================================
# Test Database Setup with StaticPool
# ============================================================================
# 1. sqlite:///:memory: with StaticPool so ALL sessions share the same DB
# 2. check_same_thread=False required for TestClient/threaded access
# 3. All models are imported before create_all() (see session_fixture)
# 4. Tables are dropped after every test so ids start from 1 again
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


def override_get_session():
    """Override session to use test engine"""
    with Session(test_engine) as session:
        yield session


@pytest.fixture(name="session", scope="function")
def session_fixture():
    """Provide a test database session with seeded levels and categories"""
    import_models()
    SQLModel.metadata.create_all(test_engine)

    with Session(test_engine) as session:
        seed_lookup_tables(session)
        yield session

    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture(name="presets")
def presets_fixture():
    """Small IKF preset over the seeded categories 1 (single) and 3 (team)"""
    return StaticRulePresetProvider(
        {
            "ikf_settings": {
                1: {"fighting_areas": 2, "fight_duration": "05:00"},
                3: {"fighting_areas": 1, "fight_duration": "05:00", "team_size": 5},
            }
        }
    )


@pytest.fixture(name="client")
def client_fixture(session: Session, presets):
    """Provide a test client with overridden database session and presets

    Overrides are set BEFORE TestClient() and cleared after it exits.
    """
    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_rule_preset_provider] = lambda: presets

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
