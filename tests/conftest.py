"""Test configuration utilities and shared fixtures."""

import sys
from datetime import datetime, timezone
from pathlib import Path

# Make ``src`` importable when pytest runs without an editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402
from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402

from norsktax.backend.app import create_app  # noqa: E402
from norsktax.backend.app.localization import Translator, get_translator  # noqa: E402
from norsktax.backend.config.year_config import (  # noqa: E402
    YearConfiguration,
    load_year_configuration,
)

FIXED_TIMESTAMP = datetime(2024, 6, 30, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def app() -> Flask:
    """Return a configured Flask application for integration tests."""

    application = create_app()
    application.config.update(TESTING=True)
    return application


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Provide a test client bound to the configured Flask app."""

    return app.test_client()


@pytest.fixture()
def config_2024() -> YearConfiguration:
    return load_year_configuration(2024)


@pytest.fixture()
def translator() -> Translator:
    return get_translator("en")


@pytest.fixture()
def fixed_clock():
    """Clock returning the same instant on every call."""

    return lambda: FIXED_TIMESTAMP
