import os

import pytest

from config_manager import ConfigManager
from tkosubs.base_provider import Credentials

SECRET_VARS = [
    "token", "GITHUB_TOKEN", "herokuusername", "HEROKU_USERNAME",
    "herokuapikey", "HEROKU_API_KEY", "herokuappname", "HEROKU_APP_NAME",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for var in SECRET_VARS:
        monkeypatch.delenv(var, raising=False)
    # Relative config paths resolve inside the temp dir
    monkeypatch.chdir(tmp_path)
    yield
    # load_dotenv writes straight to os.environ
    for var in SECRET_VARS:
        os.environ.pop(var, None)


def test_defaults_without_config_file(tmp_path):
    config = ConfigManager(str(tmp_path / "missing.yaml"))

    assert config.get("scan", "timeout") == 5.0
    assert config.get("http", "request_timeout") == 5.0
    assert config.nameservers == []
    assert config.get_credentials() == Credentials()


def test_yaml_values_and_validation(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "scan:\n"
        "  timeout: 3\n"
        "http:\n"
        "  request_timeout: -1\n"
        "dns:\n"
        "  nameservers: [9.9.9.9]\n"
        "api_keys:\n"
        "  github_token: from-yaml\n"
    )

    config = ConfigManager(str(path))

    assert config.get("scan", "timeout") == 3.0
    assert config.get("http", "request_timeout") == 5.0
    assert config.get("http", "connect_timeout") == 5.0
    assert config.nameservers == ["9.9.9.9"]
    assert config.get_credentials().github_token == "from-yaml"


def test_environment_overrides_yaml(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("api_keys:\n  github_token: from-yaml\n")
    monkeypatch.setenv("token", "from-env")
    monkeypatch.setenv("HEROKU_APP_NAME", "claimer")

    creds = ConfigManager(str(path)).get_credentials()

    assert creds.github_token == "from-env"
    assert creds.heroku_app_name == "claimer"


def test_env_file_populates_credentials(tmp_path):
    env_file = tmp_path / "secrets.env"
    env_file.write_text(
        "token=ghp_file\n"
        "herokuusername=me@example.com\n"
        "herokuapikey=key\n"
        "herokuappname=claimer\n"
    )

    creds = ConfigManager(str(tmp_path / "missing.yaml"), env_file=str(env_file)).get_credentials()

    assert creds == Credentials("ghp_file", "me@example.com", "key", "claimer")


def test_broken_yaml_falls_back_to_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("scan: [unclosed\n")

    config = ConfigManager(str(path))

    assert config.get("scan", "timeout") == 5.0


def test_env_file_in_working_directory_is_loaded(tmp_path):
    (tmp_path / ".env").write_text("token=from-cwd-env\nherokuappname=claimer\n")

    creds = ConfigManager("missing.yaml").get_credentials()

    assert creds.github_token == "from-cwd-env"
    assert creds.heroku_app_name == "claimer"


def test_config_manager_has_no_setter():
    assert not hasattr(ConfigManager, "set")
