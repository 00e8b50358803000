"""Settings loading and required credentials."""

import pytest

from task_tracker.client import AsyncTaskTracker
from task_tracker.config import Settings
from task_tracker.errors import ConfigError

from fakes import ANON_KEY, BASE_URL


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("SUPABASE_URL", "SUPABASE_ANON_KEY", "TASKS_TABLE", "UPLOADS_BUCKET",
                 "TASK_TRACKER_CONFIG_DIR", "HTTP_TIMEOUT", "REFRESH_MARGIN_SECONDS"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.supabase_url is None
    assert settings.tasks_table == "tasks"
    assert settings.uploads_bucket == "uploads"
    assert settings.http_timeout == 30.0
    assert settings.refresh_margin_seconds == 60
    assert settings.session_file.name == "session.json"


def test_reads_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("SUPABASE_URL", BASE_URL)
    monkeypatch.setenv("SUPABASE_ANON_KEY", ANON_KEY)
    monkeypatch.setenv("TASKS_TABLE", "todo_items")
    monkeypatch.setenv("TASK_TRACKER_CONFIG_DIR", str(tmp_path))
    monkeypatch.setenv("REFRESH_MARGIN_SECONDS", "120")

    settings = Settings(_env_file=None)

    assert settings.supabase_url == BASE_URL
    assert settings.supabase_anon_key == ANON_KEY
    assert settings.tasks_table == "todo_items"
    assert settings.refresh_margin_seconds == 120
    assert settings.session_file == tmp_path / "session.json"


def test_reads_dotenv_file(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(f"SUPABASE_URL={BASE_URL}\nUPLOADS_BUCKET=media\n")
    settings = Settings(_env_file=env_file)
    assert settings.supabase_url == BASE_URL
    assert settings.uploads_bucket == "media"


def test_require_credential_names_env_var():
    settings = Settings(_env_file=None)
    with pytest.raises(ConfigError, match="SUPABASE_URL") as exc:
        settings.require_credential("supabase_url", "Supabase URL")
    assert exc.value.code == "config_error"


def test_client_without_url_raises_config_error():
    with pytest.raises(ConfigError, match="SUPABASE_URL"):
        AsyncTaskTracker(settings=Settings(_env_file=None, supabase_anon_key=ANON_KEY))


def test_client_without_anon_key_raises_config_error():
    with pytest.raises(ConfigError, match="SUPABASE_ANON_KEY"):
        AsyncTaskTracker(settings=Settings(_env_file=None, supabase_url=BASE_URL))


def test_explicit_arguments_override_settings():
    client = AsyncTaskTracker(BASE_URL + "/", ANON_KEY, settings=Settings(_env_file=None))
    assert client.http.base_url == BASE_URL
    assert client.storage.bucket == "uploads"
