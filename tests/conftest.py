"""
Test configuration and fixtures.
Uses a temporary SQLite file per test. SMTP is always mocked.
"""
import pytest
from fastapi.testclient import TestClient

from leaddesk.config import Settings
from leaddesk.database import Database
from leaddesk.main import create_app
from leaddesk.schemas.leads import LeadSubmission
from leaddesk.services.lead_store import LeadStore

ADMIN_TOKEN = "test-admin-token"


def make_settings(tmp_path, **overrides) -> Settings:
    """Settings isolated from the developer's environment and .env file."""
    values = {
        "app_env": "test",
        "log_level": "WARNING",
        "db_path": str(tmp_path / "leads.sqlite"),
        "admin_token": ADMIN_TOKEN,
        "cors_origins": "*",
        "smtp_host": "",
        "smtp_port": 587,
        "smtp_user": "",
        "smtp_pass": "",
        "mail_to": "",
        "mail_from": "",
        "reply_to": "",
        "git_commit": "",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings_factory(tmp_path):
    """Build Settings with overrides on top of the isolated test defaults."""
    def _factory(**overrides) -> Settings:
        return make_settings(tmp_path, **overrides)
    return _factory


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def mail_settings(tmp_path):
    """Fully configured SMTP + owner inbox."""
    return make_settings(
        tmp_path,
        smtp_host="smtp.example.com",
        smtp_port=587,
        smtp_user="studio@example.com",
        smtp_pass="abcd efgh ijkl mnop",
        mail_to="owner@example.com",
        brand_name="Test Studio",
        shop_website="https://studio.example.com",
        wa_number="31600000000",
    )


@pytest.fixture
async def store(tmp_path):
    """LeadStore on a fresh SQLite file with the schema created."""
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'store.sqlite'}")
    lead_store = LeadStore(database.session_factory)
    await lead_store.init_schema()
    yield lead_store
    await database.dispose()


@pytest.fixture
def client(settings):
    """TestClient running the full app lifespan."""
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def client_factory():
    """Build a TestClient for custom settings; use as a context manager to run the lifespan."""
    def _factory(app_settings: Settings) -> TestClient:
        return TestClient(create_app(app_settings))
    return _factory


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def sample_payload():
    return {
        "name": "Ann",
        "email": "ann@example.com",
        "service": "wash",
        "message": "please quote",
    }


@pytest.fixture
def sample_submission(sample_payload):
    return LeadSubmission(**sample_payload)
