"""
Implementations SQLModel des repositories.

Ce module contient les implementations concretes des interfaces repository
definies dans src/core/ports/repositories.py, utilisant SQLModel pour
la persistance SQLite.

Chaque repository :
- Herite de l'interface ABC correspondante du domaine
- Recoit une session SQLModel via injection de dependances
- Convertit entre entites de domaine (dataclass) et modeles DB (SQLModel)
"""

from src.infrastructure.persistence.repositories.record_repository import (
    SQLModelRecordRepository,
)
from src.infrastructure.persistence.repositories.search_index_repository import (
    SQLModelSearchIndex,
)

__all__ = [
    "SQLModelRecordRepository",
    "SQLModelSearchIndex",
]
