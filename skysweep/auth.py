"""
Skysweep Authentication Management

File Purpose: Create the session used for the rest of the run
Primary Functions/Classes: AuthManager
Inputs and Outputs (I/O): Settings credentials in, Session out

The session is created once and never refreshed; any failure aborts the run.
"""

import logging
from typing import Optional

from .client import RecordStore
from .exceptions import AuthenticationError
from .models import Session, Settings

logger = logging.getLogger(__name__)


class AuthManager:
    """Manages authentication state for a single run."""

    def __init__(self, store: RecordStore):
        self.store = store
        self.session: Optional[Session] = None
        self.current_handle: Optional[str] = None

    def authenticate(self, settings: Settings) -> Session:
        """Create a session from the configured handle and password."""
        if not settings.handle or not settings.password:
            raise AuthenticationError(
                "Missing credentials",
                details="Set handle and password in config.json.",
            )

        try:
            session = self.store.create_session(settings.handle, settings.password)
        except AuthenticationError:
            self.session = None
            self.current_handle = None
            raise

        self.session = session
        self.current_handle = session.handle or settings.handle
        logger.info("Logged in as @%s (%s)", self.current_handle, session.did)
        return session
