"""
Repository layer — the storage capability used by the domain services.

Services never build SQL themselves; they call these repositories, which
wrap an AsyncSession. Writes are flushed, not committed: the request's
session (see database.get_db) owns the transaction.
"""

from bankcards.repositories.base import Page  # noqa: F401
from bankcards.repositories.card_repository import CardRepository  # noqa: F401
from bankcards.repositories.user_repository import UserRepository  # noqa: F401
