"""
Persistence adapters.

Each repository is bound to a SQLAlchemy session owned by the calling
service, so several repositories can take part in the same transaction.
Repositories flush but never commit.
"""

from .sql_repository import BinaryContentRepository, UserRepository, UserStatusRepository

__all__ = ["BinaryContentRepository", "UserRepository", "UserStatusRepository"]
