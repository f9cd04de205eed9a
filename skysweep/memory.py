"""In-memory RecordStore used to exercise sweeps without a network stack."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Set, Tuple

from .client import RecordStore
from .exceptions import AuthenticationError, DeleteError, ListError
from .models import Category, Page, Record, Session


class InMemoryRecordStore(RecordStore):
    """Serves pages from per-category record lists.

    Cursors are the string offset of the next page; the last page returns "".
    Deletes are recorded in ``deleted`` and do not change later listings.
    """

    def __init__(
        self,
        records: Optional[Dict[Category, Iterable[Record]]] = None,
        *,
        page_size: int = 100,
        did: str = "did:plc:memory",
        password: Optional[str] = None,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.page_size = page_size
        self.did = did
        self.password = password
        self.records: Dict[Category, List[Record]] = {
            category: list(items) for category, items in (records or {}).items()
        }
        self.list_calls: List[Tuple[Category, str]] = []
        self.deleted: List[Tuple[Category, Record]] = []
        self.fail_deletes: Set[str] = set()
        self.fail_lists: Set[Category] = set()

    def create_session(self, identifier: str, password: str) -> Session:
        if self.password is not None and password != self.password:
            raise AuthenticationError(
                "Failed to login",
                details='{"error":"AuthenticationRequired","message":"Invalid identifier or password"}',
                status_code=401,
            )
        return Session(access_jwt=f"jwt-{identifier}", did=self.did, handle=identifier)

    def list_records(
        self, session: Session, category: Category, cursor: str = ""
    ) -> Page:
        self.list_calls.append((category, cursor))
        if category in self.fail_lists:
            raise ListError(
                f"Failed to list {category.plural}",
                details='{"error":"InternalServerError"}',
                status_code=500,
            )

        try:
            offset = int(cursor) if cursor else 0
        except ValueError:
            raise ListError(f"Invalid cursor for {category.plural}: {cursor!r}")

        items = self.records.get(category, [])
        page = items[offset : offset + self.page_size]
        next_offset = offset + self.page_size
        next_cursor = str(next_offset) if next_offset < len(items) else ""
        return Page(records=list(page), cursor=next_cursor)

    def delete_record(
        self, session: Session, record: Record, category: Category
    ) -> None:
        if record.uri in self.fail_deletes:
            raise DeleteError(
                f"Failed to delete {category.value}: {record.uri}",
                details='{"error":"InvalidRequest"}',
                status_code=400,
            )
        self.deleted.append((category, record))

    @property
    def deleted_uris(self) -> List[str]:
        return [record.uri for _, record in self.deleted]
