"""SQLAlchemy models. Importing this package registers every table on ``Base.metadata``."""

from __future__ import annotations

from .catalog import Brand, EquipmentItem, Product, ProductCategory
from .contacts import Client, Supplier
from .personnel import Personnel, PersonnelAssignment
from .pricing import JobPosition, Service
from .profile import Profile

__all__ = [
    "Brand",
    "Client",
    "EquipmentItem",
    "JobPosition",
    "Personnel",
    "PersonnelAssignment",
    "Product",
    "ProductCategory",
    "Profile",
    "Service",
    "Supplier",
]
