"""Demo Data — a small Northwind-style dataset so the assistant has something to talk about.

Invariants:
    - Idempotent: does nothing when any Customer already exists
    - One commit for the whole dataset
    - Names match the prompt suggestions in services/chat_defaults.py
"""

import logging
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from data_copilot.core.domain_types import InvoiceStatus, OrderStatus
from data_copilot.models import (
    Category, Customer, Department, Employee, EmployeeTerritory, Invoice,
    Order, OrderItem, Product, Region, Shipper, Supplier, Territory,
)

logger = logging.getLogger(__name__)

_REGIONS = {
    "North": ("Seattle", "Portland", "Spokane"),
    "South": ("Los Angeles", "San Diego", "Phoenix"),
    "East": ("Chicago", "Detroit"),
    "West": ("Denver", "Dallas", "Houston"),
}

_DEPARTMENTS = (
    ("Sales", "SALES", "Building A, Floor 2", "250000"),
    ("Engineering", "ENG", "Building B, Floor 1", "400000"),
    ("Human Resources", "HR", "Building A, Floor 1", "120000"),
    ("Marketing", "MKT", "Building C, Floor 3", "180000"),
    ("Finance", "FIN", "Building A, Floor 3", "150000"),
)

_EMPLOYEES = (
    ("Nancy", "Davolio", "Sales Manager", ("Seattle", "Portland")),
    ("Andrew", "Fuller", "Senior Sales", ("Los Angeles", "San Diego", "Phoenix")),
    ("Janet", "Leverling", "Sales Representative", ("Chicago",)),
    ("Margaret", "Peacock", "Sales Representative", ("Denver", "Dallas")),
    ("Steven", "Buchanan", "Sales Associate", ("Houston",)),
)

_CATEGORIES = (
    ("Beverages", "Soft drinks, coffees, teas, beers, and ales"),
    ("Condiments", "Sweet and savory sauces, relishes, spreads, and seasonings"),
    ("Confections", "Desserts, candies, and sweet breads"),
    ("Dairy", "Cheeses"),
    ("Seafood", "Seaweed and fish"),
)

_SUPPLIERS = (
    ("Exotic Liquids", "Charlotte Cooper", "London", "UK"),
    ("New Orleans Cajun Delights", "Shelley Burke", "New Orleans", "USA"),
    ("Tokyo Traders", "Yoshi Nagase", "Tokyo", "Japan"),
    ("Cooperativa de Quesos", "Antonio del Valle", "Oviedo", "Spain"),
    ("Pavlova", "Ian Devling", "Melbourne", "Australia"),
)

# name, category, supplier, unit price, units in stock, discontinued
_PRODUCTS = (
    ("Chai", "Beverages", "Exotic Liquids", "18.00", 39, False),
    ("Chang", "Beverages", "Exotic Liquids", "19.00", 17, False),
    ("Aniseed Syrup", "Condiments", "Exotic Liquids", "10.00", 13, False),
    ("Chef Anton's Cajun Seasoning", "Condiments", "New Orleans Cajun Delights", "22.00", 53, False),
    ("Chef Anton's Gumbo Mix", "Condiments", "New Orleans Cajun Delights", "21.35", 0, True),
    ("Ikura", "Seafood", "Tokyo Traders", "31.00", 31, False),
    ("Konbu", "Seafood", "Tokyo Traders", "6.00", 24, False),
    ("Queso Cabrales", "Dairy", "Cooperativa de Quesos", "21.00", 22, False),
    ("Queso Manchego", "Dairy", "Cooperativa de Quesos", "38.00", 86, False),
    ("Pavlova", "Confections", "Pavlova", "17.45", 15, False),
)

_SHIPPERS = (
    ("Speedy Express", "(503) 555-9831"),
    ("United Package", "(503) 555-3199"),
    ("Federal Shipping", "(503) 555-9931"),
)

_CUSTOMERS = (
    ("Alfreds Futterkiste", "Maria Anders", "Sales Representative", "Berlin", "Germany"),
    ("Around the Horn", "Thomas Hardy", "Sales Representative", "London", "UK"),
    ("Berglunds snabbköp", "Christina Berglund", "Order Administrator", "Luleå", "Sweden"),
    ("Blondel père et fils", "Frédérique Citeaux", "Marketing Manager", "Strasbourg", "France"),
    ("Ernst Handel", "Roland Mendel", "Sales Manager", "Graz", "Austria"),
)

# customer, employee, shipper, status, days ago, items (product, quantity)
_ORDERS = (
    ("Alfreds Futterkiste", "Nancy", "Speedy Express", OrderStatus.Delivered, 40,
     (("Chai", 10), ("Chang", 5))),
    ("Around the Horn", "Andrew", "United Package", OrderStatus.Processing, 12,
     (("Ikura", 4), ("Konbu", 20))),
    ("Around the Horn", "Janet", "Federal Shipping", OrderStatus.Processing, 6,
     (("Queso Cabrales", 12),)),
    ("Berglunds snabbköp", "Margaret", "Speedy Express", OrderStatus.Shipped, 9,
     (("Pavlova", 15), ("Aniseed Syrup", 6))),
    ("Ernst Handel", "Steven", "United Package", OrderStatus.New, 1,
     (("Queso Manchego", 8),)),
    ("Blondel père et fils", "Nancy", "Federal Shipping", OrderStatus.New, 0,
     (("Chef Anton's Cajun Seasoning", 3),)),
)


async def seed_demo_data(db: AsyncSession) -> bool:
    """Insert the demo dataset. Returns False when data already exists."""
    existing = await db.scalar(select(func.count()).select_from(Customer))
    if existing:
        return False

    today = date.today()

    territories: dict[str, Territory] = {}
    for region_name, cities in _REGIONS.items():
        region = Region(name=region_name)
        db.add(region)
        for city in cities:
            territories[city] = Territory(name=city, region=region)
    # Backref appends do not cascade into the session: add explicitly
    db.add_all(territories.values())

    departments = {
        name: Department(
            name=name, code=code, location=location,
            budget=Decimal(budget), is_active=True,
        )
        for name, code, location, budget in _DEPARTMENTS
    }
    db.add_all(departments.values())

    employees: dict[str, Employee] = {}
    manager = None
    for first, last, title, cities in _EMPLOYEES:
        employee = Employee(
            first_name=first, last_name=last, title=title,
            hire_date=today - timedelta(days=365 * 3),
            email=f"{first.lower()}.{last.lower()}@example.com",
            department=departments["Sales"],
            reports_to=manager,
        )
        manager = manager or employee
        employees[first] = employee
        db.add(employee)
        for city in cities:
            db.add(EmployeeTerritory(employee=employee, territory=territories[city]))

    categories = {n: Category(name=n, description=d) for n, d in _CATEGORIES}
    suppliers = {
        name: Supplier(company_name=name, contact_name=contact, city=city, country=country)
        for name, contact, city, country in _SUPPLIERS
    }
    products = {
        name: Product(
            name=name, category=categories[cat], supplier=suppliers[sup],
            unit_price=Decimal(price), units_in_stock=stock, discontinued=discontinued,
        )
        for name, cat, sup, price, stock, discontinued in _PRODUCTS
    }
    shippers = {n: Shipper(company_name=n, phone=p) for n, p in _SHIPPERS}
    customers = {
        name: Customer(
            company_name=name, contact_name=contact, contact_title=title,
            city=city, country=country,
        )
        for name, contact, title, city, country in _CUSTOMERS
    }
    db.add_all([
        *categories.values(), *suppliers.values(), *products.values(),
        *shippers.values(), *customers.values(),
    ])

    for number, (customer, employee, shipper, status, days_ago, items) in enumerate(_ORDERS, 1):
        order_date = today - timedelta(days=days_ago)
        order = Order(
            order_date=order_date,
            required_date=order_date + timedelta(days=14),
            shipped_date=order_date + timedelta(days=2)
            if status in (OrderStatus.Shipped, OrderStatus.Delivered) else None,
            freight=Decimal("12.50"),
            ship_city=customers[customer].city,
            ship_country=customers[customer].country,
            status=status,
            customer=customers[customer],
            employee=employees[employee],
            shipper=shippers[shipper],
        )
        for product, quantity in items:
            order.order_items.append(OrderItem(
                product=products[product],
                unit_price=products[product].unit_price,
                quantity=quantity,
                discount=Decimal("0"),
            ))
        if status is not OrderStatus.New:
            order.invoice = Invoice(
                invoice_number=f"INV-{1000 + number}",
                invoice_date=order_date,
                due_date=order_date + timedelta(days=30),
                status=InvoiceStatus.Overdue if days_ago > 30 else InvoiceStatus.Sent,
            )
        db.add(order)

    await db.commit()
    logger.info("Demo data seeded")
    return True
