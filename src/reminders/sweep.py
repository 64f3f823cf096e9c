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
Sweep Fallback Module

Periodic re-scan that sends reminders the per-entry timers missed: entries
registered after their fire instant, timers lost to a restart, or timers
that failed to arm. Uses discord.ext.tasks for the loop.
"""

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Callable, Optional

from discord.ext import tasks

from analytics import track

from .delivery import ReminderDelivery
from .interfaces import EntrySource
from .models import fingerprint_for
from .registry import ReminderRegistry

if TYPE_CHECKING:
    from .rollover import DailyRollover

logger = logging.getLogger("reminderbot.reminders.sweep")

DEFAULT_SWEEP_INTERVAL = 60


class SweepFallback:
    """
    Runs a loop every 60 seconds (configurable) looking for due, unsent entries.

    Re-scanning entries the timers already handled is expected; the registry
    claim in the delivery path keeps each fingerprint to a single send.
    """

    def __init__(
        self,
        source: EntrySource,
        registry: ReminderRegistry,
        delivery: ReminderDelivery,
        lead_minutes: int,
        clock: Callable[[], datetime],
        rollover: Optional["DailyRollover"] = None,
        interval_seconds: int = DEFAULT_SWEEP_INTERVAL,
    ):
        self.source = source
        self.registry = registry
        self.delivery = delivery
        self.lead_minutes = lead_minutes
        self.rollover = rollover
        self._clock = clock
        self._started = False
        self.last_sweep_at: Optional[datetime] = None

        if interval_seconds != DEFAULT_SWEEP_INTERVAL:
            self._tick.change_interval(seconds=interval_seconds)

    def start(self) -> None:
        """Start the sweep loop."""
        if not self._started:
            self._tick.start()
            self._started = True
            logger.info("Reminder sweep started")

    def stop(self) -> None:
        """Stop the sweep loop."""
        if self._started:
            self._tick.cancel()
            self._started = False
            logger.info("Reminder sweep stopped")

    @property
    def is_running(self) -> bool:
        return self._started

    @tasks.loop(seconds=DEFAULT_SWEEP_INTERVAL)
    async def _tick(self) -> None:
        """One sweep pass."""
        try:
            await self.sweep_once()
        except Exception as e:
            logger.error(f"Error in reminder sweep loop: {e}", exc_info=True)
            track(
                "sweep_error",
                properties={
                    "error_type": type(e).__name__,
                    "error_message": str(e)[:200],
                },
            )

    async def sweep_once(self) -> int:
        """
        Send every entry that is due and not yet sent.

        Returns:
            Number of reminders sent successfully
        """
        if self.rollover is not None:
            await self.rollover.roll_over()

        now = self._clock()
        self.last_sweep_at = now
        upcoming = await self.source.entries_starting_within(self.lead_minutes)

        sent = 0
        for entry in upcoming:
            fingerprint = fingerprint_for(entry)
            if self.registry.is_sent(fingerprint):
                continue

            fire_at = entry.start - timedelta(minutes=self.lead_minutes)
            if fire_at > now:
                continue

            logger.info(f"Sweep picked up unsent reminder for: {entry.description}")
            if await self.delivery.deliver(fingerprint, entry, fire_at, origin="sweep"):
                sent += 1
        return sent
