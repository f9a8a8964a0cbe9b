"""Service test fixtures — async DB, schema catalog, data tools, sample records.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - db_manager wraps the test engine, so data tools use the production session scope
    - sample_orders inserts a deterministic set: 2 customers, 3 New + 2 Shipped orders

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for tool tests
      (PostgreSQL-specific features not exercised here)
    - Catalog built from the real Base.registry: tests see exactly the production model
"""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

import data_copilot.models  # noqa: F401
from data_copilot.core.domain_types import OrderStatus
from data_copilot.db.base import Base
from data_copilot.infrastructure.database import DatabaseSessionManager
from data_copilot.models import Customer, Employee, Order, Product, Category
from data_copilot.services.data_tools import DataTools
from data_copilot.services.schema_catalog import SchemaCatalog


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def db_manager(test_engine):
    return DatabaseSessionManager("sqlite+aiosqlite://", engine=test_engine)


@pytest.fixture
def catalog():
    return SchemaCatalog(Base.registry)


@pytest.fixture
def data_tools(catalog, db_manager):
    return DataTools(catalog, db_manager.session)


@pytest.fixture
async def sample_orders(test_db):
    """Two customers, one employee, five orders (3 New, 2 Shipped)."""
    alfreds = Customer(
        company_name="Alfreds Futterkiste", contact_name="Maria Anders",
        city="Berlin", country="Germany",
    )
    horn = Customer(
        company_name="Around the Horn", contact_name="Thomas Hardy",
        city="London", country="UK",
    )
    nancy = Employee(first_name="Nancy", last_name="Davolio", title="Sales Manager")
    statuses = [
        OrderStatus.New, OrderStatus.Shipped, OrderStatus.New,
        OrderStatus.Shipped, OrderStatus.New,
    ]
    orders = [
        Order(
            order_date=date(2024, 1, i + 1),
            freight=Decimal("10.50") * (i + 1),
            ship_city="Berlin" if i % 2 == 0 else "London",
            status=status,
            customer=alfreds if i % 2 == 0 else horn,
            employee=nancy,
        )
        for i, status in enumerate(statuses)
    ]
    test_db.add_all([alfreds, horn, nancy, *orders])
    await test_db.commit()
    return {"customers": [alfreds, horn], "employee": nancy, "orders": orders}


@pytest.fixture
async def sample_products(test_db):
    beverages = Category(name="Beverages", description="Soft drinks and teas")
    products = [
        Product(
            name=f"Product {i:02d}", unit_price=Decimal("1.00") * i,
            units_in_stock=i, category=beverages,
        )
        for i in range(1, 31)
    ]
    test_db.add_all([beverages, *products])
    await test_db.commit()
    return products
