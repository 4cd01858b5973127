import pytest
from dotenv import load_dotenv

from fakes import A_URL, B_URL, C_URL, FakeClock, RecordingSleep
from orchestrator.dispatch_types import ProviderDescriptor
from orchestrator.provider_registry import ProviderRegistry

# Load environment variables from .env file for tests
load_dotenv()


@pytest.fixture
def registry():
    return ProviderRegistry(
        (
            ProviderDescriptor(A_URL, "q", "A"),
            ProviderDescriptor(B_URL, "content", "B"),
            ProviderDescriptor(C_URL, "q", "C"),
        )
    )


@pytest.fixture
def sleeper():
    return RecordingSleep()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def mock_env(monkeypatch):
    """Fixture to mock environment variables for testing."""
    env_vars = {
        "PORT": "8080",
        "DISPATCH_TIMEOUT_MS": "5000",
        "DISPATCH_RETRY_COUNT": "1",
        "DISPATCH_CACHE_ENABLED": "false",
        "DISPATCH_CACHE_TTL_SECONDS": "60",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars
