"""
Base service class for GreenBot services.

Services compose the ledger operations; they share the operations object so
every service reads the same record store through the same clock.
"""

import logging

logger = logging.getLogger(__name__)

class BaseService:
    """Base class for all services built on the activity ledger."""

    def __init__(self, activity_ops):
        """
        Initialize base service with the ledger operations.

        Args:
            activity_ops: ActivityOperations bound to the record store
        """
        self.activity_ops = activity_ops

    @property
    def db(self):
        return self.activity_ops.db

    @property
    def clock(self):
        return self.activity_ops.clock
