import os

# Must be set before app modules read settings
os.environ["ENV"] = "test"
os.environ["AUTH_MODE"] = "mock"
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["CREATE_TABLES"] = "false"
os.environ["OPENAI_API_KEY"] = ""
os.environ["ADMIN_USER_IDS"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db import Base, get_db
from app import models  # noqa: F401
from app.models.user import UserRole
from app.services.auth import mock_token_for
from app.services.insights import InsightService, get_insight_service
from app.services.storage import Storage

# Use SQLite in-memory for test DB
TEST_DATABASE_URL = "sqlite+pysqlite:///:memory:"
# In-memory SQLite needs a StaticPool so the TestClient requests and the test
# setup sessions all see the same database.
engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Dependency override
def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_test_db():
    # recreate schema for each test to ensure isolation
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def no_llm():
    """Answers get the canned insights unless a test installs its own service."""
    app.dependency_overrides[get_insight_service] = lambda: InsightService(llm=None)
    yield
    app.dependency_overrides.pop(get_insight_service, None)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db_session():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage(db_session):
    return Storage(db_session)


def auth_headers(role: str = "mentee") -> dict:
    return {"Authorization": f"Bearer {mock_token_for(UserRole(role))}"}


@pytest.fixture
def mentee_headers():
    return auth_headers("mentee")


@pytest.fixture
def mentor_headers():
    return auth_headers("mentor")


@pytest.fixture
def both_headers():
    return auth_headers("both")


@pytest.fixture
def valid_application():
    return {
        "currentTitle": "Staff Engineer",
        "currentCompany": "Acme Corp",
        "workEmail": "jordan@acme-corp.com",
        "linkedinProfile": "https://www.linkedin.com/in/jordan",
        "yearsExperience": 12,
        "expertise": ["technical", "leadership"],
        "industries": ["Software"],
        "education": {
            "degree": "BSc",
            "institution": "State University",
            "year": 2010,
            "field": "Computer Science",
        },
        "workHistory": [
            {
                "title": "Senior Engineer",
                "company": "Acme Corp",
                "years": "2015-2020",
                "description": "Led the payments platform team",
            }
        ],
        "bio": "Engineer and team lead with a decade of experience growing junior developers.",
        "mentoringMotivation": "I want to give back the support I received early in my career.",
        "availabilityHours": 4,
        "preferredCategories": ["technical", "career"],
        "references": [
            {
                "name": "Sam Lee",
                "title": "Director",
                "company": "Acme Corp",
                "email": "sam@acme-corp.com",
                "relationship": "Manager",
            },
            {
                "name": "Alex Kim",
                "title": "Engineer",
                "company": "Acme Corp",
                "email": "alex@acme-corp.com",
                "relationship": "Peer",
            },
        ],
    }
