"""
Operations Layer

Business logic that composes database access into ledger workflows.

Architecture:
- Database layer: record store, sessions, per-user write locks
- Operations layer: ledger writes/reads and user registration
- Services layer: scoring and leaderboards built on the operations
- Command layer: Discord integration and user interface
"""

from .activity_operations import ActivityOperations
from .user_operations import UserOperations

__all__ = ['ActivityOperations', 'UserOperations']
