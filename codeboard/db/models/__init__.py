from codeboard.db.models.base import Base
from codeboard.db.models.user import Platform, User

__all__ = [
    "Base",
    "Platform",
    "User",
]
