import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep a framework override in the developer's shell out of the tests."""
    monkeypatch.delenv("MDX2VAST_FRAMEWORK", raising=False)
    monkeypatch.delenv("MDX2VAST_LOG_LEVEL", raising=False)


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop sinks the CLI installs, so they don't outlive the captured streams."""
    yield
    logger.remove()
    logger.disable("mdx2vast")
