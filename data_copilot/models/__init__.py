"""ORM Models — SQLAlchemy declarative models for the business data model.

Invariants:
    - All business entities inherit from BaseObject (models/base_object.py)
    - Every model lives under this package: the schema catalog discovers
      entities by module namespace

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from data_copilot.models.category import Category  # noqa: F401
from data_copilot.models.customer import Customer  # noqa: F401
from data_copilot.models.department import Department  # noqa: F401
from data_copilot.models.employee import Employee  # noqa: F401
from data_copilot.models.employee_territory import EmployeeTerritory  # noqa: F401
from data_copilot.models.invoice import Invoice  # noqa: F401
from data_copilot.models.order import Order  # noqa: F401
from data_copilot.models.order_item import OrderItem  # noqa: F401
from data_copilot.models.product import Product  # noqa: F401
from data_copilot.models.region import Region  # noqa: F401
from data_copilot.models.shipper import Shipper  # noqa: F401
from data_copilot.models.supplier import Supplier  # noqa: F401
from data_copilot.models.territory import Territory  # noqa: F401
from data_copilot.models.tool_call import ToolCall  # noqa: F401
