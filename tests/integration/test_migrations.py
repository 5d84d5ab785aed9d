from __future__ import annotations

import sys
from pathlib import Path

from alembic import command
from sqlalchemy import create_engine, inspect

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from mop.domain.common.ids import OrderId
from mop.infrastructure.db.models.order import Base
from mop.infrastructure.db.repositories.order_repo import SqlAlchemyOrderRepository
from mop.tools.init_db import alembic_config, upgrade

sys.path.insert(0, str(Path(__file__).resolve().parent))

from test_sqlalchemy_order_repo import _order


def test_migrations_build_the_mapped_schema(tmp_path: Path) -> None:
    url = f"sqlite:///{tmp_path / 'orders.db'}"

    upgrade(url)

    engine = create_engine(url)
    try:
        inspector = inspect(engine)
        assert {"orders", "order_restaurants", "alembic_version"} <= set(inspector.get_table_names())
        for table in Base.metadata.sorted_tables:
            migrated = {column["name"] for column in inspector.get_columns(table.name)}
            assert migrated == set(table.columns.keys())
        indexes = {index["name"] for index in inspector.get_indexes("orders")}
        assert {"ix_orders_rider_id", "ix_orders_status_placed_at"} <= indexes

        repository = SqlAlchemyOrderRepository(engine=engine)
        repository.add(_order("ord_migrated"))
        assert repository.get(OrderId("ord_migrated")) == _order("ord_migrated")
    finally:
        engine.dispose()


def test_downgrade_removes_the_order_tables(tmp_path: Path) -> None:
    url = f"sqlite:///{tmp_path / 'orders.db'}"
    upgrade(url)

    command.downgrade(alembic_config(url), "base")

    engine = create_engine(url)
    try:
        assert set(inspect(engine).get_table_names()) == {"alembic_version"}
    finally:
        engine.dispose()
