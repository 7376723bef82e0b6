from .entities import (
    EntityMatch,
    EntityRecord,
    EntityRepository,
    InMemoryEntityRepository,
    SubmitterHistory,
)

__all__ = [
    "EntityMatch",
    "EntityRecord",
    "EntityRepository",
    "InMemoryEntityRepository",
    "SubmitterHistory",
]
