"""ORM Models — SQLAlchemy declarative models for all persisted entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - ORM rows stay inside infrastructure/; repositories convert them to core entities

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all runs
"""

from shoplist.models.user import User  # noqa: F401
from shoplist.models.login_code import LoginCode  # noqa: F401
from shoplist.models.shopping_list import ShoppingList  # noqa: F401
from shoplist.models.list_member import ListMember  # noqa: F401
from shoplist.models.invitation import Invitation  # noqa: F401
from shoplist.models.shopping_item import ShoppingItem  # noqa: F401
from shoplist.models.system_settings import SystemSettings  # noqa: F401
