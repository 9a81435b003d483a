"""
ORM models. Importing this package registers every table on
``Base.metadata``, which both ``create_schema`` and Alembic read.
"""

from app.db.models.base import Base
from app.db.models.customer import Customer
from app.db.models.employee import Employee

__all__ = ["Base", "Customer", "Employee"]
