import pytest
from worksection_mcp.core.config import (
    WorksectionConfig,
    config_from_env,
    normalize_account_url,
)
from worksection_mcp.core.errors import WorksectionConfigError

ENV_VARS = (
    "WORKSECTION_ACCOUNT_URL",
    "WORKSECTION_ADMIN_API_KEY",
    "WORKSECTION_ATTACHMENT_TOKEN",
    "SLACK_BOT_TOKEN",
    "WORKSECTION_TIMEOUT_S",
    "WORKSECTION_ATTACHMENT_TIMEOUT_S",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("https://acme.worksection.com", "https://acme.worksection.com/"),
        ("https://acme.worksection.com/", "https://acme.worksection.com/"),
        ("  HTTPS://acme.worksection.com  ", "https://acme.worksection.com/"),
        ("http://localhost:8080/ws", "http://localhost:8080/ws/"),
    ],
)
def test_normalize_account_url(raw, expected):
    assert normalize_account_url(raw) == expected


@pytest.mark.parametrize(
    "raw", ["", "acme.worksection.com", "ftp://acme.com", "https://"]
)
def test_normalize_account_url_rejects_invalid(raw):
    with pytest.raises(WorksectionConfigError):
        normalize_account_url(raw)


def test_config_requires_api_key():
    with pytest.raises(WorksectionConfigError) as exc:
        WorksectionConfig(account_url="https://acme.worksection.com", api_key="  ")
    assert "WORKSECTION_ADMIN_API_KEY" in str(exc.value)


def test_config_rejects_non_positive_timeouts():
    with pytest.raises(WorksectionConfigError):
        WorksectionConfig(
            account_url="https://acme.worksection.com", api_key="k", timeout_seconds=0
        )


def test_config_repr_masks_secrets():
    config = WorksectionConfig(
        account_url="https://acme.worksection.com",
        api_key="super-secret",
        attachment_bearer_token="xoxb-123",
    )
    text = repr(config)
    assert "super-secret" not in text
    assert "xoxb-123" not in text
    assert "acme.worksection.com" in text


def test_config_is_immutable():
    config = WorksectionConfig(account_url="https://acme.worksection.com", api_key="k")
    with pytest.raises(AttributeError):
        config.api_key = "other"  # type: ignore[misc]


def test_config_from_env_defaults(monkeypatch):
    monkeypatch.setenv("WORKSECTION_ACCOUNT_URL", "https://acme.worksection.com")
    monkeypatch.setenv("WORKSECTION_ADMIN_API_KEY", "k")

    config = config_from_env(use_dotenv=False)

    assert config.account_url == "https://acme.worksection.com/"
    assert config.api_key == "k"
    assert config.attachment_bearer_token is None
    assert config.timeout_seconds == 30.0
    assert config.attachment_timeout_seconds == 30.0


def test_config_from_env_token_and_timeouts(monkeypatch):
    monkeypatch.setenv("WORKSECTION_ACCOUNT_URL", "https://acme.worksection.com")
    monkeypatch.setenv("WORKSECTION_ADMIN_API_KEY", "k")
    monkeypatch.setenv("SLACK_BOT_TOKEN", "xoxb-fallback")
    monkeypatch.setenv("WORKSECTION_TIMEOUT_S", "12.5")
    monkeypatch.setenv("WORKSECTION_ATTACHMENT_TIMEOUT_S", "5")

    config = config_from_env(use_dotenv=False)
    assert config.attachment_bearer_token == "xoxb-fallback"
    assert config.timeout_seconds == 12.5
    assert config.attachment_timeout_seconds == 5.0

    monkeypatch.setenv("WORKSECTION_ATTACHMENT_TOKEN", "explicit")
    assert config_from_env(use_dotenv=False).attachment_bearer_token == "explicit"


@pytest.mark.parametrize(
    "missing,needle",
    [
        ("WORKSECTION_ACCOUNT_URL", "WORKSECTION_ACCOUNT_URL"),
        ("WORKSECTION_ADMIN_API_KEY", "WORKSECTION_ADMIN_API_KEY"),
    ],
)
def test_config_from_env_missing_values(monkeypatch, missing, needle):
    monkeypatch.setenv("WORKSECTION_ACCOUNT_URL", "https://acme.worksection.com")
    monkeypatch.setenv("WORKSECTION_ADMIN_API_KEY", "k")
    monkeypatch.delenv(missing)

    with pytest.raises(WorksectionConfigError) as exc:
        config_from_env(use_dotenv=False)
    assert needle in str(exc.value)


def test_config_from_env_bad_timeout(monkeypatch):
    monkeypatch.setenv("WORKSECTION_ACCOUNT_URL", "https://acme.worksection.com")
    monkeypatch.setenv("WORKSECTION_ADMIN_API_KEY", "k")
    monkeypatch.setenv("WORKSECTION_TIMEOUT_S", "soon")

    with pytest.raises(WorksectionConfigError) as exc:
        config_from_env(use_dotenv=False)
    assert "WORKSECTION_TIMEOUT_S" in str(exc.value)


def test_config_from_env_honours_dotenv_toggle(monkeypatch):
    calls = []
    monkeypatch.setattr(
        "worksection_mcp.core.config.load_dotenv", lambda *a, **k: calls.append(1)
    )
    monkeypatch.setenv("WORKSECTION_ACCOUNT_URL", "https://acme.worksection.com")
    monkeypatch.setenv("WORKSECTION_ADMIN_API_KEY", "k")

    config_from_env(use_dotenv=False)
    assert calls == []
    config_from_env()
    assert calls == [1]
