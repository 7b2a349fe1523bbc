"""Cached data table snapshot with asynchronous refresh."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ..config import settings
from .models import DataTable

logger = logging.getLogger(__name__)

TableFetcher = Callable[[], Awaitable[DataTable]]


class DataTableProvider:
    """
    Serve the current data table snapshot.

    Readers get the cached snapshot synchronously. A refresh fetches a new
    table and swaps it in wholesale, so a reader never sees a half-updated
    table.
    """

    def __init__(
        self,
        fetcher: Optional[TableFetcher] = None,
        initial: Optional[DataTable] = None,
        refresh_timeout: Optional[float] = None,
    ):
        """
        Initialize the provider.

        Args:
            fetcher: Coroutine function returning a fresh DataTable
            initial: Snapshot to serve before the first refresh
            refresh_timeout: Seconds to wait for a refresh (defaults to settings)
        """
        self.fetcher = fetcher
        self._snapshot = initial or DataTable()
        self.refresh_timeout = (
            refresh_timeout
            if refresh_timeout is not None
            else settings.catalog_refresh_timeout_seconds
        )

    def snapshot(self) -> DataTable:
        """Return the cached snapshot."""
        return self._snapshot

    def replace(self, table: DataTable):
        """Replace the cached snapshot."""
        self._snapshot = table

    async def refresh(self) -> DataTable:
        """
        Fetch a fresh snapshot, keeping the old one on failure.

        Returns:
            The snapshot in effect after the refresh attempt
        """
        if self.fetcher is None:
            return self._snapshot

        try:
            table = await asyncio.wait_for(self.fetcher(), timeout=self.refresh_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"Data table refresh timed out after {self.refresh_timeout}s, "
                "keeping previous snapshot"
            )
            return self._snapshot
        except Exception as e:
            logger.warning(f"Data table refresh failed, keeping previous snapshot: {e}")
            return self._snapshot

        self._snapshot = table
        logger.info(
            f"Data table refreshed: {len(table.dimensions)} dimensions, "
            f"{len(table.measures)} measures, {len(table.rows)} rows"
        )
        return table
