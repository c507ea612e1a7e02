from sqlalchemy import create_engine, inspect

from tokenmarket.core.config import settings
from tokenmarket.core.migrations import head_revision, upgrade_to_head
from tokenmarket.models import Base


def test_head_is_volume_tables():
    assert head_revision() == "20221105_0002"


def test_upgrade_builds_same_schema_as_models(tmp_path, monkeypatch):
    db_path = tmp_path / "migrated.db"
    monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite+aiosqlite:///{db_path}")

    upgrade_to_head()

    engine = create_engine(f"sqlite:///{db_path}")
    try:
        inspector = inspect(engine)
        tables = set(inspector.get_table_names()) - {"alembic_version"}
        assert tables == set(Base.metadata.tables)

        for name, table in Base.metadata.tables.items():
            columns = {c["name"] for c in inspector.get_columns(name)}
            assert columns == {c.name for c in table.columns}, name

            pk = inspector.get_pk_constraint(name)["constrained_columns"]
            assert pk == [c.name for c in table.primary_key.columns], name

            indexes = {ix["name"]: ix["column_names"] for ix in inspector.get_indexes(name)}
            expected = {ix.name: [c.name for c in ix.columns] for ix in table.indexes}
            assert indexes == expected, name
    finally:
        engine.dispose()
