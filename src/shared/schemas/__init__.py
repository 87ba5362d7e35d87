from src.shared.schemas.base import (
    BaseSchema,
    RecordSchema,
)

__all__ = [
    "BaseSchema",
    "RecordSchema",
]
