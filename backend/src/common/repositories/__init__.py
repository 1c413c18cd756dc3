from .base_repository import BaseRepository, DuplicateEntity, EntityNotFound, RepositoryError, RepositoryException, StaleEntity


__all__ = [
    "BaseRepository",
    "DuplicateEntity",
    "EntityNotFound",
    "RepositoryError",
    "RepositoryException",
    "StaleEntity",
]
