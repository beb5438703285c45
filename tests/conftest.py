import pytest

from limitless_mcp import ApiClient, LimitlessConfig

from fakes import FakeSession


@pytest.fixture
def config():
    return LimitlessConfig(api_key="test-key")


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def client(config, session):
    return ApiClient(config, session=session)
