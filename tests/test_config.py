"""Tests for settings loading, client initialization and logging setup."""

import logging
import os

import pytest
from pydantic import ValidationError

from coinspot.client import CoinSpotClient
from coinspot.config import env_overrides, load_settings
from coinspot.init import create_client_from_settings
from coinspot.logging import configure_logging
from coinspot.settings import DEFAULT_BASE_URL, ClientConfig, Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the caller's COINSPOT_ variables out of these tests."""
    for key in list(os.environ):
        if key.startswith("COINSPOT_"):
            monkeypatch.delenv(key)


class TestClientConfig:
    def test_defaults(self):
        config = ClientConfig()
        assert config.base_url == DEFAULT_BASE_URL
        assert config.timeout == 10.0
        assert not config.has_credentials

    def test_frozen(self):
        config = ClientConfig(auth_key="k", auth_secret="s")
        with pytest.raises(ValidationError):
            config.base_url = "https://other.test"

    def test_rejects_bad_timeout(self):
        with pytest.raises(ValidationError):
            ClientConfig(timeout=0)

    def test_has_credentials(self):
        assert ClientConfig(auth_key="k", auth_secret="s").has_credentials
        assert not ClientConfig(auth_key="k").has_credentials
        assert not ClientConfig(auth_secret="s").has_credentials


class TestLoadSettings:
    def test_missing_file_gives_defaults(self, tmp_path):
        settings = load_settings(tmp_path / "missing.yml")
        assert settings.coinspot.base_url == DEFAULT_BASE_URL
        assert settings.env == "dev"

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text(
            "env: prod\n"
            "coinspot:\n"
            "  auth_key: abc\n"
            "  auth_secret: xyz\n"
            "  timeout: 5\n",
            encoding="utf-8",
        )

        settings = load_settings(path)

        assert settings.env == "prod"
        assert settings.coinspot.auth_key == "abc"
        assert settings.coinspot.auth_secret.get_secret_value() == "xyz"
        assert settings.coinspot.timeout == 5

    def test_env_overrides(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yml"
        path.write_text("coinspot:\n  auth_key: from-file\n  timeout: 5\n", encoding="utf-8")
        monkeypatch.setenv("COINSPOT_AUTH_KEY", "12345")
        monkeypatch.setenv("COINSPOT_AUTH_SECRET", "007")
        monkeypatch.setenv("COINSPOT_TIMEOUT", "2.5")
        monkeypatch.setenv("COINSPOT_ENV", "prod")

        settings = load_settings(path)

        assert settings.env == "prod"
        assert settings.coinspot.auth_key == "12345"
        assert settings.coinspot.auth_secret.get_secret_value() == "007"
        assert settings.coinspot.timeout == 2.5

    def test_env_overrides_ignore_unrelated(self):
        overrides = env_overrides({
            "COINSPOT_CONFIG": "x.yml",
            "COINSPOT_LOG_LEVEL": "DEBUG",
            "COINSPOT_BASE_URL": "https://example.test",
            "OTHER_AUTH_KEY": "nope",
        })

        assert overrides == {"coinspot": {"base_url": "https://example.test"}}

    def test_invalid_env_value(self, tmp_path, monkeypatch):
        monkeypatch.setenv("COINSPOT_TIMEOUT", "soon")

        with pytest.raises(ValueError, match="Invalid configuration"):
            load_settings(tmp_path / "missing.yml")

    def test_config_path_from_env(self, tmp_path, monkeypatch):
        path = tmp_path / "alt.yml"
        path.write_text("env: staging\n", encoding="utf-8")
        monkeypatch.setenv("COINSPOT_CONFIG", str(path))

        assert load_settings().env == "staging"

    def test_non_mapping_root(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ValueError, match="must be a mapping"):
            load_settings(path)

    def test_invalid_settings(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("coinspot:\n  unknown: 1\n", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid configuration"):
            load_settings(path)

    def test_redacted(self):
        settings = Settings(coinspot=ClientConfig(auth_key="abc", auth_secret="xyz"))

        data = settings.redacted()

        assert data["coinspot"]["auth_key"] == "***"
        assert data["coinspot"]["auth_secret"] == "***"
        assert "xyz" not in str(data)


class TestCreateClient:
    def test_create_client_from_settings(self):
        settings = Settings(
            coinspot=ClientConfig(
                base_url="https://example.test",
                auth_key="abc",
                auth_secret="xyz",
                timeout=3,
            )
        )

        client = create_client_from_settings(settings, raise_on_error=True)

        assert isinstance(client, CoinSpotClient)
        assert client.config == settings.coinspot
        assert client.raise_on_error is True
        assert client.session is None

    def test_create_client_without_credentials(self, caplog):
        with caplog.at_level(logging.WARNING):
            client = create_client_from_settings(Settings())

        assert not client.config.has_credentials
        assert "only public endpoints" in caplog.text

    def test_from_config_rejects_connection_overrides(self):
        config = ClientConfig(auth_key="abc", auth_secret="xyz")

        with pytest.raises(TypeError):
            CoinSpotClient.from_config(config, base_url="https://other.test")

        client = CoinSpotClient.from_config(config, nonce_factory=lambda: 7)
        assert client.nonce_factory() == 7
        assert client.config == config


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def restore_loggers(self):
        package = logging.getLogger("coinspot")
        state = package.handlers[:], package.level, package.propagate
        yield
        for handler in package.handlers[:]:
            if handler not in state[0]:
                package.removeHandler(handler)
                handler.close()
        package.setLevel(state[1])
        package.propagate = state[2]

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv("COINSPOT_LOG_LEVEL", "debug")
        logger = configure_logging()
        assert logger.name == "coinspot"
        assert logger.level == logging.DEBUG

    def test_leaves_root_logger_alone(self):
        root = logging.getLogger()
        before = root.handlers[:], root.level

        configure_logging()

        assert (root.handlers, root.level) == before

    def test_reconfigure_replaces_own_handlers(self, tmp_path):
        logger = logging.getLogger("coinspot")
        foreign = logging.NullHandler()
        logger.addHandler(foreign)

        configure_logging(tmp_path / "logs")
        configure_logging(tmp_path / "logs")

        owned = [h for h in logger.handlers if getattr(h, "_coinspot_owned", False)]
        assert len(owned) == 2
        assert foreign in logger.handlers
        logger.removeHandler(foreign)

    def test_file_handler(self, tmp_path):
        logger = configure_logging(tmp_path / "logs")
        logging.getLogger("coinspot.client").info("hello")

        for handler in logger.handlers:
            handler.flush()

        assert "hello" in (tmp_path / "logs" / "coinspot.log").read_text()
