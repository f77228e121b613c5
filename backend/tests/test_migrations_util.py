from __future__ import annotations

from pathlib import Path

from alembic.config import Config
from alembic.script import ScriptDirectory
from sqlalchemy import create_engine, inspect, text

from backend.app.database import Base
from backend.app.migrations import REVISION_SENTINELS, run_database_migrations

BACKEND_DIR = Path(__file__).resolve().parents[1]
PORTFOLIO_TABLES = {"users", "projects", "messages", "skills"}


def _configure_alembic_script() -> ScriptDirectory:
    config = Config(str(BACKEND_DIR / "alembic.ini"))
    config.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    return ScriptDirectory.from_config(config)


def _migrate(url: str, monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", url)
    try:
        run_database_migrations()
    finally:
        monkeypatch.delenv("DATABASE_URL", raising=False)


def _version(url: str) -> str:
    engine = create_engine(url, connect_args={"check_same_thread": False})
    try:
        with engine.connect() as connection:
            return connection.scalar(text("SELECT version_num FROM alembic_version"))
    finally:
        engine.dispose()


def test_sentinels_point_at_the_current_head() -> None:
    head = _configure_alembic_script().get_current_head()

    assert REVISION_SENTINELS[0][0] == head


def test_run_database_migrations_creates_schema_on_empty_database(tmp_path, monkeypatch) -> None:
    url = f"sqlite:///{tmp_path / 'fresh.db'}"

    _migrate(url, monkeypatch)

    engine = create_engine(url, connect_args={"check_same_thread": False})
    inspector = inspect(engine)
    assert PORTFOLIO_TABLES <= set(inspector.get_table_names())
    skill_columns = {column["name"] for column in inspector.get_columns("skills")}
    assert {"display_order", "years_of_experience", "is_active"} <= skill_columns
    engine.dispose()

    assert _version(url) == _configure_alembic_script().get_current_head()


def test_run_database_migrations_upgrades_existing_database(tmp_path, monkeypatch) -> None:
    url = f"sqlite:///{tmp_path / 'legacy.db'}"

    engine = create_engine(url, connect_args={"check_same_thread": False})
    with engine.begin() as connection:
        connection.execute(text("CREATE TABLE legacy_table (id INTEGER PRIMARY KEY)"))
    engine.dispose()

    _migrate(url, monkeypatch)

    engine = create_engine(url, connect_args={"check_same_thread": False})
    tables = set(inspect(engine).get_table_names())
    engine.dispose()

    assert {"legacy_table", "alembic_version"} <= tables
    assert PORTFOLIO_TABLES <= tables
    assert _version(url) == _configure_alembic_script().get_current_head()


def test_run_database_migrations_stamps_head_for_current_schema(tmp_path, monkeypatch) -> None:
    url = f"sqlite:///{tmp_path / 'current.db'}"

    engine = create_engine(url, connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    engine.dispose()

    _migrate(url, monkeypatch)

    assert _version(url) == _configure_alembic_script().get_current_head()


def test_run_database_migrations_is_idempotent(tmp_path, monkeypatch) -> None:
    url = f"sqlite:///{tmp_path / 'twice.db'}"

    _migrate(url, monkeypatch)
    _migrate(url, monkeypatch)

    assert _version(url) == _configure_alembic_script().get_current_head()
