"""Save and restore editing sessions through a key-value store."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import ValidationError

from ..config import settings
from .models import FieldMapping, SessionState
from .storage import KeyValueStore

logger = logging.getLogger(__name__)


class SessionPersistence:
    """Persist prompts and field mappings for one editing session."""

    def __init__(self, store: KeyValueStore, retention: Optional[timedelta] = None):
        """
        Initialize session persistence.

        Args:
            store: Backend holding the session entries
            retention: Age after which sweep() deletes entries
        """
        self.store = store
        self.retention = retention or timedelta(days=settings.session_retention_days)

    async def save(
        self,
        key: str,
        system_prompt: str,
        user_prompt: str,
        mappings: list[FieldMapping],
        timestamp: Optional[datetime] = None,
    ) -> SessionState:
        """Store the session state under a key."""
        state = SessionState(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            field_mappings=mappings,
            timestamp=timestamp or datetime.now(timezone.utc),
        )
        await self.store.put(key, state.model_dump(mode="json"), state.timestamp)
        logger.info(f"Saved session {key} with {len(mappings)} mappings")
        return state

    async def load(self, key: str) -> Optional[SessionState]:
        """
        Load a session state.

        Returns:
            The state, or None when missing, stale or unreadable
        """
        try:
            raw = await self.store.get(key)
        except ValueError as e:
            logger.warning(f"Discarding unreadable session {key}: {e}")
            await self.store.delete(key)
            return None

        if raw is None:
            return None

        try:
            return SessionState.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Discarding malformed session {key}: {e.error_count()} errors")
            await self.store.delete(key)
            return None

    async def sweep(self) -> int:
        """Delete sessions past the retention window."""
        return await self.store.sweep_expired(self.retention)
