"""
This module contains fixtures and test utilities for the application.

It includes a fixture to provide a test client for the FastAPI app, a fixture to
temporarily override application settings, and fixtures controlling where the card
font comes from.
"""
from unittest.mock import AsyncMock, patch
import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.core.config import settings
from app.core.fonts import font_loader
from app.core.utils import app_path


@pytest.fixture(scope="module")
def client():
    """Provides a test client for making requests to the FastAPI app."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def test_app():
    """Provides the FastAPI app itself, for ASGI transports."""
    return app


@pytest.fixture(scope="function")
def mock_settings(request, monkeypatch):
    """Allows to temporarily override settings for a test."""
    mock_data = request.param
    for key, value in mock_data.items():
        monkeypatch.setattr(settings, key, value)
    yield settings


@pytest.fixture
def mock_logger():
    """Patches the logger object to allow capturing log messages in tests."""
    with patch("app.api.routes.og.logger") as mock_logger_obj:
        yield mock_logger_obj


@pytest.fixture(scope="session")
def font_data():
    """The bundled bold font bytes."""
    with open(app_path(settings.OG_FONT_FILE), "rb") as f:
        return f.read()


@pytest.fixture
def font_fetcher(font_data):
    """
    Replaces the font source of the shared loader with an AsyncMock returning the
    bundled font, and starts every test from an empty loader.
    """
    font_loader.reset()
    fetcher = AsyncMock(return_value=font_data)
    with patch.object(font_loader, "_fetcher", fetcher):
        yield fetcher
    font_loader.reset()
