from pathlib import Path

import sqlalchemy as sa
from alembic import command
from alembic.config import Config


def _alembic_config(db_url: str) -> Config:
    backend_root = Path(__file__).parent.parent
    config = Config(str(backend_root / "alembic.ini"))
    config.set_main_option("script_location", str(backend_root / "alembic"))
    config.set_main_option("sqlalchemy.url", db_url)
    return config


def test_upgrade_and_downgrade(tmp_path):
    db_url = f"sqlite:///{tmp_path / 'migrations.db'}"
    config = _alembic_config(db_url)

    command.upgrade(config, "head")

    engine = sa.create_engine(db_url)
    try:
        tables = set(sa.inspect(engine).get_table_names())
        assert {
            "admin_credentials",
            "admin_sessions",
            "admission_inquiries",
            "gallery",
            "site_content",
        } <= tables

        session_indexes = {index["name"] for index in sa.inspect(engine).get_indexes("admin_sessions")}
        assert "ix_admin_sessions_token_hash" in session_indexes
    finally:
        engine.dispose()

    command.downgrade(config, "base")

    engine = sa.create_engine(db_url)
    try:
        assert set(sa.inspect(engine).get_table_names()) <= {"alembic_version"}
    finally:
        engine.dispose()
