# reminderbot - Timetable Reminder Service
# Copyright (c) 2025-2026 Slash Daemon slashdaemon@protonmail.com
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, version 3 of the License.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.
#
# Commercial licensing: [slashdaemon@protonmail.com]

"""
Event tracking for reminder deliveries and schedule loads.

Usage:
    from analytics import track, track_async

    # Fire-and-forget, uses a background task
    track("reminder_sent", fingerprint="5:00am-morningwalk", origin="timer")

    # When the caller needs to know the row was written
    await track_async("reminders_loaded", properties={"entries": 12, "scheduled": 9})

Events go to the reminder_events table when DATABASE_URL is set; otherwise
tracking is a no-op. The category column is derived from the event name.
"""

import asyncio
import json
import logging
import os
from typing import Any, Optional

import asyncpg

logger = logging.getLogger("reminderbot.analytics")

EVENT_CATEGORIES: dict[str, str] = {
    "reminder_sent": "reminder",
    "reminder_send_failed": "reminder",
    "reminder_delivery_error": "error",
    "sweep_error": "error",
    "rollover_error": "error",
    "reminders_loaded": "system",
}

# Module-level connection pool (initialized lazily)
_pool: Optional[asyncpg.Pool] = None
_enabled: bool = os.getenv("ANALYTICS_ENABLED", "true").lower() == "true"


async def _get_pool() -> Optional[asyncpg.Pool]:
    """Get or create the connection pool."""
    global _pool
    if _pool is None and _enabled:
        database_url = os.getenv("DATABASE_URL")
        if database_url:
            try:
                _pool = await asyncpg.create_pool(database_url, min_size=1, max_size=2)
            except Exception as e:
                logger.warning(f"Analytics pool creation failed: {e}")
                return None
    return _pool


async def track_async(
    event_name: str,
    fingerprint: Optional[str] = None,
    origin: Optional[str] = None,
    properties: Optional[dict[str, Any]] = None,
) -> bool:
    """
    Record one reminder event.

    Args:
        event_name: A key of EVENT_CATEGORIES
        fingerprint: Reminder fingerprint, for per-reminder events
        origin: "timer" or "sweep", for delivery events
        properties: Remaining event data (error details, load counts)

    Returns:
        True if the event was recorded, False otherwise
    """
    if not _enabled:
        return False

    category = EVENT_CATEGORIES.get(event_name)
    if category is None:
        logger.warning(f"Unknown analytics event: {event_name}")
        return False

    pool = await _get_pool()
    if pool is None:
        return False

    try:
        await pool.execute(
            """
            INSERT INTO reminder_events
                (event_name, event_category, fingerprint, origin, properties)
            VALUES ($1, $2, $3, $4, $5)
            """,
            event_name,
            category,
            fingerprint,
            origin,
            json.dumps(properties or {}),
        )
        return True
    except Exception as e:
        logger.debug(f"Analytics tracking failed: {e}")
        return False


def track(
    event_name: str,
    fingerprint: Optional[str] = None,
    origin: Optional[str] = None,
    properties: Optional[dict[str, Any]] = None,
) -> None:
    """Record an event in a background task without blocking the caller."""
    if not _enabled:
        return

    try:
        loop = asyncio.get_running_loop()
        loop.create_task(track_async(event_name, fingerprint, origin, properties))
    except RuntimeError:
        # No running loop - skip tracking
        pass


async def shutdown() -> None:
    """Close the connection pool. Call on service shutdown."""
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None
