"""Demo Data — verifies the seed is complete, queryable, and idempotent."""

from sqlalchemy import func, select

from data_copilot.models import Customer, Invoice, Order, Product, Territory
from data_copilot.services.seed_data import _REGIONS, seed_demo_data


async def _count(db, model):
    return await db.scalar(select(func.count()).select_from(model))


async def test_seeds_once(test_db):
    assert await seed_demo_data(test_db) is True
    customers = await _count(test_db, Customer)
    assert customers > 0
    assert await _count(test_db, Product) > 0

    assert await seed_demo_data(test_db) is False
    assert await _count(test_db, Customer) == customers


async def test_non_new_orders_are_invoiced(test_db):
    await seed_demo_data(test_db)
    orders = (await test_db.execute(select(Order))).scalars().all()
    invoiced = [o for o in orders if o.invoice_id is not None]
    assert invoiced
    assert all(o.status.name != "New" for o in invoiced)
    assert await _count(test_db, Invoice) == len({o.invoice_id for o in invoiced})


async def test_seeded_data_answers_suggested_questions(test_db, data_tools):
    await seed_demo_data(test_db)
    result = await data_tools.query_entity({
        "entity_name": "Customer", "filter": "company_name=Alfreds",
    })
    assert result.startswith("Found 1 Customer record(s):")
    products = await data_tools.query_entity({"entity_name": "Product", "filter": "name=chai"})
    assert "name: Chai" in products


async def test_every_territory_is_stored(test_db):
    await seed_demo_data(test_db)
    stored = set((await test_db.execute(select(Territory.name))).scalars().all())
    expected = {city for cities in _REGIONS.values() for city in cities}
    assert stored == expected
