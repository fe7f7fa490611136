"""Pytest configuration and fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient

from config import Config
from shortlinks.database.memory import InMemoryLinkStore
from shortlinks.identity import StaticUserDirectory
from shortlinks.policy import CallerIdentity, OwnershipPolicy
from shortlinks.service import LinkService
from shortlinks.shortcode import ShortCodeGenerator
from shortlinks.common.logging_config import setup_logging
from web_app import create_app


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def store(logger):
    """Create an empty in-memory link store."""
    return InMemoryLinkStore(logger=logger)


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=7)


@pytest.fixture
def user_directory():
    return StaticUserDirectory({"u1": "alice", "u2": "bob", "root": "admin"})


@pytest.fixture
def service(store, short_code_generator, user_directory, logger) -> LinkService:
    """Create service instance."""
    return LinkService(
        store=store,
        policy=OwnershipPolicy(),
        generator=short_code_generator,
        user_directory=user_directory,
        cache=None,  # No cache for tests
        logger=logger,
    )


@pytest.fixture
def alice():
    return CallerIdentity.of("u1")


@pytest.fixture
def bob():
    return CallerIdentity.of("u2")


@pytest.fixture
def admin():
    return CallerIdentity.of("root", ["Admin"])


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]


@pytest.fixture
def config():
    return Config(database_url="memory://", base_url="http://testserver")


@pytest.fixture
def app(service, config):
    """Create test FastAPI app."""
    return create_app(service_instance=service, config=config)


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac
