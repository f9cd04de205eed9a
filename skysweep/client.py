"""Record store boundary and the XRPC (HTTP) implementation.

The sweep talks to the remote repository only through ``RecordStore``, so
pagination, filtering and counting can be exercised against the in-memory
store in ``skysweep.memory`` without a network stack.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import requests

from .exceptions import AuthenticationError, DeleteError, ListError
from .models import Category, Page, Record, Session

logger = logging.getLogger(__name__)

CREATE_SESSION = "/com.atproto.server.createSession"
LIST_RECORDS = "/com.atproto.repo.listRecords"
DELETE_RECORD = "/com.atproto.repo.deleteRecord"

USER_AGENT = "skysweep/1.0"


class RecordStore(ABC):
    """The three remote operations a sweep needs."""

    @abstractmethod
    def create_session(self, identifier: str, password: str) -> Session:
        """Exchange credentials for a Session. Raises AuthenticationError."""

    @abstractmethod
    def list_records(
        self, session: Session, category: Category, cursor: str = ""
    ) -> Page:
        """Return one page of records for the category. Raises ListError."""

    @abstractmethod
    def delete_record(
        self, session: Session, record: Record, category: Category
    ) -> None:
        """Delete a single record. Raises DeleteError."""

    def close(self) -> None:
        """Release any resources held by the store."""

    def __enter__(self) -> "RecordStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class XrpcClient(RecordStore):
    """Sync wrapper around the AT Protocol repository XRPC endpoints.

    Uses a requests.Session. No retries and no backoff: the first failure is
    reported to the caller. ``timeout`` is passed straight to requests, so the
    default of None waits indefinitely.
    """

    def __init__(self, base_url: str, *, timeout: Optional[float] = None) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers.update(
            {
                "User-Agent": USER_AGENT,
                "Accept": "application/json",
            }
        )

    def close(self) -> None:
        """Close the HTTP session."""
        self._session.close()

    def _url(self, endpoint: str) -> str:
        return f"{self._base_url}{endpoint}"

    @staticmethod
    def _auth_headers(session: Session) -> Dict[str, str]:
        return {"Authorization": f"Bearer {session.access_jwt}"}

    # -----------------------------------------------------------------------
    # Server endpoints
    # -----------------------------------------------------------------------

    def create_session(self, identifier: str, password: str) -> Session:
        url = self._url(CREATE_SESSION)
        logger.debug("POST %s (identifier=%s)", url, identifier)
        try:
            response = self._session.post(
                url,
                json={"identifier": identifier, "password": password},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise AuthenticationError(
                "Failed to login", details=str(exc), original_error=exc
            )

        if not _is_success(response):
            raise AuthenticationError(
                "Failed to login",
                details=response.text,
                status_code=response.status_code,
            )

        try:
            data = response.json()
            access_jwt = data["accessJwt"]
            did = data["did"]
        except (ValueError, KeyError, TypeError) as exc:
            raise AuthenticationError(
                "Malformed createSession response",
                details=response.text,
                original_error=exc,
                status_code=response.status_code,
            )

        return Session(access_jwt=access_jwt, did=did, handle=data.get("handle"))

    # -----------------------------------------------------------------------
    # Repository endpoints
    # -----------------------------------------------------------------------

    def list_records(
        self, session: Session, category: Category, cursor: str = ""
    ) -> Page:
        url = self._url(LIST_RECORDS)
        params: Dict[str, Any] = {"repo": session.did, "collection": category.collection}
        if cursor:
            params["cursor"] = cursor

        logger.debug("GET %s collection=%s cursor=%r", url, category.collection, cursor)
        try:
            response = self._session.get(
                url,
                params=params,
                headers=self._auth_headers(session),
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise ListError(
                f"Failed to list {category.plural}", details=str(exc), original_error=exc
            )

        if not _is_success(response):
            raise ListError(
                f"Failed to list {category.plural}",
                details=response.text,
                status_code=response.status_code,
            )

        try:
            data = response.json()
            entries = data.get("records", [])
            if not isinstance(entries, list):
                raise TypeError("'records' is not a list")
            records = [Record.from_api(entry) for entry in entries]
            next_cursor = data.get("cursor") or ""
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise ListError(
                f"Malformed listRecords response for {category.plural}",
                details=str(exc),
                original_error=exc,
                status_code=response.status_code,
            )

        return Page(records=records, cursor=str(next_cursor))

    def delete_record(
        self, session: Session, record: Record, category: Category
    ) -> None:
        url = self._url(DELETE_RECORD)
        payload = {
            "repo": session.did,
            "collection": category.collection,
            "rkey": record.rkey,
            "cid": record.cid,
        }
        message = f"Failed to delete {category.value}: {record.uri}"

        logger.debug("POST %s rkey=%s", url, record.rkey)
        try:
            response = self._session.post(
                url,
                json=payload,
                headers=self._auth_headers(session),
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise DeleteError(message, details=str(exc), original_error=exc)

        if not _is_success(response):
            raise DeleteError(
                message, details=response.text, status_code=response.status_code
            )


def _is_success(response: requests.Response) -> bool:
    return 200 <= response.status_code < 300
