"""
Skysweep Content Deletion Operations

File Purpose: Age filter and single-record deletion
Primary Functions/Classes: record_age, should_delete, DeletionManager
Inputs and Outputs (I/O): Records and the retention window in, deleteRecord calls out

A record is eligible for deletion when its age is strictly greater than the
retention window. Records whose createdAt cannot be parsed have no age and are
never deleted.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from .client import RecordStore
from .models import Category, Record, Session, parse_datetime

logger = logging.getLogger(__name__)


def record_age(record: Record, now: datetime) -> Optional[timedelta]:
    """Age of the record at ``now``, or None when createdAt is unparseable."""
    created = parse_datetime(record.created_at)
    if created is None:
        return None
    return now - created


def should_delete(record: Record, retention_days: int, now: datetime) -> bool:
    """True iff the record is older than ``retention_days`` whole days."""
    age = record_age(record, now)
    if age is None:
        return False
    return age > timedelta(days=retention_days)


class DeletionManager:
    """Deletes records through a RecordStore, or only reports them on a dry run."""

    def __init__(self, store: RecordStore, session: Session, dry_run: bool = False):
        self.store = store
        self.session = session
        self.dry_run = dry_run

    def delete(self, record: Record, category: Category) -> None:
        """Delete one record. Raises DeleteError on failure."""
        if self.dry_run:
            logger.debug("Dry run, not deleting %s", record.uri)
            return
        self.store.delete_record(self.session, record, category)
