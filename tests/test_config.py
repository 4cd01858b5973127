from config.config import Config


def test_reads_environment(mock_env):
    config = Config()
    assert config.PORT == 8080
    assert config.TIMEOUT_MS == 5000
    assert config.RETRY_COUNT == 1
    assert config.CACHE_ENABLED is False
    assert config.CACHE_TTL_SECONDS == 60
    assert config.validate() is True


def test_server_defaults(monkeypatch):
    for name in (
        "PORT",
        "DISPATCH_TIMEOUT_MS",
        "DISPATCH_RETRY_COUNT",
        "DISPATCH_CACHE_ENABLED",
        "DISPATCH_CACHE_TTL_SECONDS",
        "DISPATCH_CACHE_MAX_ENTRIES",
        "PROVIDER_REGISTRY_PATH",
    ):
        monkeypatch.delenv(name, raising=False)

    config = Config()
    assert config.PORT == 3000
    assert config.TIMEOUT_MS == 15000
    assert config.RETRY_COUNT == 3
    assert config.CACHE_ENABLED is True
    assert config.CACHE_MAX_ENTRIES is None
    assert config.PROVIDER_REGISTRY_PATH is None


def test_validate_rejects_bad_values(mock_env, monkeypatch):
    monkeypatch.setenv("DISPATCH_RETRY_COUNT", "-1")
    monkeypatch.setenv("DISPATCH_CACHE_MAX_ENTRIES", "0")
    assert Config().validate() is False


def test_validate_rejects_missing_registry_file(mock_env, monkeypatch, tmp_path):
    monkeypatch.setenv("PROVIDER_REGISTRY_PATH", str(tmp_path / "nope.yaml"))
    assert Config().validate() is False


def test_dispatch_info(mock_env):
    assert Config().get_dispatch_info() == "timeout 5000ms, 1 retries, cache off"
