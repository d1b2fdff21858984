"""
ABOUTME: Pytest configuration and shared fixtures
ABOUTME: Provides isolated environments, schemas and env files for all tests
"""

import json
import os
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from env_guardian import EnvGuardian


@pytest.fixture
def temp_dir():
    """Provide a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def test_env_vars():
    """Provide a well-formed application environment."""
    return {
        "APP_NAME": "guardian",
        "PORT": "8080",
        "DEBUG": "yes",
        "ALLOWED_HOSTS": "a.example.com, b.example.com ,c.example.com",
        "DATABASE_URL": "postgres://db.internal:5432/app",
        "ADMIN_EMAIL": "ops@example.com",
        "LOG_LEVEL": "info",
    }


@pytest.fixture
def app_schema():
    """Provide a schema that exercises every built-in type."""
    return {
        "APP_NAME": {"type": "string", "required": True, "minLength": 3},
        "PORT": {"type": "number", "min": 1, "max": 65535, "integer": True},
        "DEBUG": "boolean",
        "ALLOWED_HOSTS": {"type": "array", "minLength": 1},
        "DATABASE_URL": {"type": "url", "protocols": ["postgres", "postgresql"]},
        "ADMIN_EMAIL": "email",
        "LOG_LEVEL": {"type": "enum", "values": ["debug", "info", "warning"]},
    }


@pytest.fixture
def guardian():
    """Provide a collect-all EnvGuardian that does not touch the filesystem."""
    return EnvGuardian(load_dotenv=False)


@pytest.fixture
def strict_guardian():
    """Provide a fail-fast EnvGuardian that does not touch the filesystem."""
    return EnvGuardian(load_dotenv=False, strict=True)


@pytest.fixture
def clean_env():
    """Run a test against an empty process environment."""
    with patch.dict(os.environ, {}, clear=True):
        yield


def create_test_file(filepath, content):
    """Create a test file with given content"""
    os.makedirs(os.path.dirname(filepath), exist_ok=True)
    with open(filepath, "w") as f:
        f.write(content)
    return filepath


@pytest.fixture
def schema_file(temp_dir, app_schema):
    """Write the app schema to a JSON file."""
    path = temp_dir / "schema.json"
    create_test_file(str(path), json.dumps(app_schema))
    return path
