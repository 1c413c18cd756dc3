from .base import Base, CreatedAtMixin, TimestampMixin, UUIDPrimaryKeyMixin, new_uuid


__all__ = [
    "Base",
    "CreatedAtMixin",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "new_uuid",
]
