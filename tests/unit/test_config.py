import pytest

from pricer.config import ServerConfig
from pricer.errors import ConfigError

ENV_VARS = ("PRICER_HOST", "PRICER_PORT", "DB_URL", "PRICER_IDLE_TIMEOUT", "LOG_LEVEL", "LOG_FILE")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    cfg = ServerConfig.from_env()

    assert cfg.host == "0.0.0.0"
    assert cfg.port == 9000
    assert cfg.db_url == "sqlite:///./options.db"
    assert cfg.idle_timeout == 300.0
    assert cfg.log_file is None


def test_environment_is_read(monkeypatch):
    monkeypatch.setenv("PRICER_PORT", "9100")
    monkeypatch.setenv("DB_URL", "sqlite:////tmp/pricer.db")
    monkeypatch.setenv("PRICER_IDLE_TIMEOUT", "0")

    cfg = ServerConfig.from_env()

    assert cfg.port == 9100
    assert cfg.db_url == "sqlite:////tmp/pricer.db"
    assert cfg.idle_timeout == 0.0


def test_explicit_overrides_win(monkeypatch):
    monkeypatch.setenv("PRICER_PORT", "9100")

    cfg = ServerConfig.from_env(port="9200", host=None)

    assert cfg.port == 9200
    assert cfg.host == "0.0.0.0"


@pytest.mark.parametrize("port", ["abc", "-1", "70000"])
def test_invalid_port(port):
    with pytest.raises(ConfigError):
        ServerConfig.from_env(port=port)
