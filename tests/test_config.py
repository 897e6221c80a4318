"""
Settings tests - env aliases and derived properties.
"""
from leaddesk.config import DEFAULT_ADMIN_HTML_PATH, Settings


def _settings(**values) -> Settings:
    return Settings(_env_file=None, **values)


class TestEnvironment:
    def test_admin_token_from_env(self, monkeypatch):
        monkeypatch.setenv("ADMIN_TOKEN", "from-env")
        assert Settings(_env_file=None).admin_token == "from-env"

    def test_admin_api_key_alias(self, monkeypatch):
        monkeypatch.delenv("ADMIN_TOKEN", raising=False)
        monkeypatch.setenv("ADMIN_API_KEY", "legacy-key")
        assert Settings(_env_file=None).admin_token == "legacy-key"

    def test_render_commit_alias(self, monkeypatch):
        monkeypatch.delenv("GIT_COMMIT", raising=False)
        monkeypatch.setenv("RENDER_GIT_COMMIT", "deadbeef")
        assert Settings(_env_file=None).git_commit == "deadbeef"

    def test_smtp_port_parsed(self, monkeypatch):
        monkeypatch.setenv("SMTP_PORT", "465")
        assert Settings(_env_file=None).smtp_port == 465

    def test_defaults(self):
        settings = _settings(admin_token="", git_commit="")
        assert settings.port == 10000
        assert settings.db_path == "leads.sqlite"
        assert settings.admin_html_path == DEFAULT_ADMIN_HTML_PATH
        assert settings.max_body_bytes == 1024 * 1024


class TestDerived:
    def test_sqlalchemy_url_from_db_path(self):
        assert _settings(db_path="/data/leads.sqlite").sqlalchemy_url == (
            "sqlite+aiosqlite:////data/leads.sqlite"
        )

    def test_database_url_overrides_db_path(self):
        settings = _settings(db_path="ignored.sqlite", database_url="sqlite+aiosqlite:///:memory:")
        assert settings.sqlalchemy_url == "sqlite+aiosqlite:///:memory:"

    def test_cors_origin_list_trims_and_skips_blanks(self):
        settings = _settings(cors_origins=" https://a.example , ,https://*.b.example,")
        assert settings.cors_origin_list == ["https://a.example", "https://*.b.example"]

    def test_smtp_configured_needs_all_four(self):
        complete = {"smtp_host": "smtp.x", "smtp_port": 587, "smtp_user": "u", "smtp_pass": "p"}
        assert _settings(**complete).smtp_configured is True
        for key in ("smtp_host", "smtp_user", "smtp_pass"):
            assert _settings(**{**complete, key: ""}).smtp_configured is False

    def test_sender_falls_back_to_smtp_user(self):
        assert _settings(smtp_user="u@x.com", mail_from="").sender_address == "u@x.com"
        assert _settings(smtp_user="u@x.com", mail_from="Studio <s@x.com>").sender_address == (
            "Studio <s@x.com>"
        )
