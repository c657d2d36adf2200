"""
Tests for the Alembic migration chain.
"""

from sqlalchemy import create_engine, inspect

from profile_api.database import run_migrations


def _inspect(db_path):
    engine = create_engine(f"sqlite:///{db_path}")
    try:
        inspector = inspect(engine)
        return {
            table: {
                "columns": {col["name"]: col for col in inspector.get_columns(table)},
                "unique": inspector.get_unique_constraints(table),
                "foreign_keys": inspector.get_foreign_keys(table),
            }
            for table in inspector.get_table_names()
        }
    finally:
        engine.dispose()


class TestMigrations:
    """Upgrade and downgrade on a scratch SQLite database."""

    def test_upgrade_creates_tables(self, tmp_path):
        """Head revision creates users and user_profiles."""
        db_path = tmp_path / "migrate.db"
        run_migrations("head", f"sqlite+aiosqlite:///{db_path}")

        tables = _inspect(db_path)
        assert {"users", "user_profiles", "alembic_version"} <= set(tables)

    def test_user_profiles_layout(self, tmp_path):
        """Columns, nullability, unique owner and cascading FK."""
        db_path = tmp_path / "migrate.db"
        run_migrations("head", f"sqlite+aiosqlite:///{db_path}")

        profiles = _inspect(db_path)["user_profiles"]
        columns = profiles["columns"]
        assert set(columns) == {
            "id",
            "user_id",
            "age",
            "date_of_birth",
            "phone",
            "country_code",
            "country",
            "state",
            "city",
            "created_at",
            "updated_at",
        }
        assert columns["user_id"]["nullable"] is False
        assert columns["created_at"]["nullable"] is False
        assert columns["updated_at"]["nullable"] is False
        assert columns["city"]["nullable"] is True

        assert any(uc["column_names"] == ["user_id"] for uc in profiles["unique"])
        (fk,) = profiles["foreign_keys"]
        assert fk["referred_table"] == "users"
        assert fk["options"].get("ondelete") == "CASCADE"

    def test_downgrade_to_base_drops_tables(self, tmp_path):
        """Base revision removes the application tables."""
        db_path = tmp_path / "migrate.db"
        url = f"sqlite+aiosqlite:///{db_path}"
        run_migrations("head", url)
        run_migrations("base", url)

        tables = set(_inspect(db_path))
        assert "users" not in tables
        assert "user_profiles" not in tables
