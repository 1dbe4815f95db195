"""
Bulk Synchronization Services

Sequential download of whole domains with progress and cancellation.
"""

from .bulk_synchronizer import BulkSynchronizer
from .cancellation import CancellationToken
from .manager import BulkSyncManager

__all__ = ["BulkSynchronizer", "BulkSyncManager", "CancellationToken"]
