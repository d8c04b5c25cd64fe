"""Global enums: values must match the CHECK constraints in alembic/versions."""

from enum import Enum


class ProductStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ConfirmSide(str, Enum):
    """Which party of a transaction is confirming."""
    BUYER = "buyer"
    SELLER = "seller"
