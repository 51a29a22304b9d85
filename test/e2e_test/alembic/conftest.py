"""Fixtures for Alembic migration tests."""

import io
from pathlib import Path
from typing import Callable, Optional

import pytest
from alembic.config import Config

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent.parent


@pytest.fixture
def make_alembic_config() -> Callable[..., Config]:
    """Build an Alembic config pointing at the project's migrations.

    No ini file is passed so that running migrations leaves the test
    session's logging configuration alone.
    """

    def _make(url: str, output_buffer: Optional[io.StringIO] = None) -> Config:
        config = Config(output_buffer=output_buffer)
        config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
        config.set_main_option("sqlalchemy.url", url)
        return config

    return _make


@pytest.fixture
def database_path(tmp_path: Path) -> Path:
    return tmp_path / "migrations.db"


@pytest.fixture
def alembic_config(make_alembic_config, database_path: Path) -> Config:
    return make_alembic_config(f"sqlite+aiosqlite:///{database_path}")


@pytest.fixture
def sync_url(database_path: Path) -> str:
    """URL for inspecting the migrated database with the synchronous driver."""
    return f"sqlite:///{database_path}"
