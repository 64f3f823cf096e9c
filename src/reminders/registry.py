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
Reminder Registry Module

In-memory table of the current day's reminders, keyed by fingerprint.
The registry is the only place where a reminder's sent flag changes.
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

from .models import ScheduledReminder, TimeSlotEntry, fingerprint_for

logger = logging.getLogger("reminderbot.reminders.registry")


class ReminderRegistry:
    """
    Owns the fingerprint -> ScheduledReminder mapping for one day.

    None of the methods await, so within a single event loop every call is
    atomic with respect to other reminder activations.
    """

    def __init__(self, clock: Callable[[], datetime]):
        """
        Initialize the registry.

        Args:
            clock: Returns the current timezone-aware local time
        """
        self._clock = clock
        self._reminders: dict[str, ScheduledReminder] = {}

    def register(self, entry: TimeSlotEntry, fire_at: datetime) -> Optional[str]:
        """
        Register a reminder for an entry.

        Args:
            entry: Timetable entry
            fire_at: Absolute instant the reminder should go out

        Returns:
            The fingerprint, or None if the entry was skipped
        """
        fingerprint = fingerprint_for(entry)

        if fire_at < self._clock():
            logger.debug(f"Skipping past reminder for: {entry.description}")
            return None

        existing = self._reminders.get(fingerprint)
        if existing is not None and existing.sent:
            logger.debug(f"Reminder {fingerprint} already sent today, not rescheduling")
            return None

        if existing is not None:
            logger.info(
                f"Reminder {fingerprint} already registered, skipping duplicate "
                f"entry: {entry.description}"
            )
            return None

        self._reminders[fingerprint] = ScheduledReminder(
            fingerprint=fingerprint, entry=entry, fire_at=fire_at
        )
        return fingerprint

    def claim(
        self,
        fingerprint: str,
        entry: Optional[TimeSlotEntry] = None,
        fire_at: Optional[datetime] = None,
        origin: str = "timer",
    ) -> bool:
        """
        Atomically check and set the sent flag ahead of a transport call.

        When no record exists and an entry is given (sweep path), a record
        is inserted already marked as sent.

        Returns:
            True if the caller now owns the send, False if it was already sent
        """
        reminder = self._reminders.get(fingerprint)
        if reminder is not None:
            if reminder.sent:
                return False
            reminder.sent = True
            reminder.origin = origin
            return True

        if entry is None:
            return False

        self._reminders[fingerprint] = ScheduledReminder(
            fingerprint=fingerprint,
            entry=entry,
            fire_at=fire_at or self._clock(),
            sent=True,
            origin=origin,
        )
        return True

    def mark_sent(self, fingerprint: str) -> None:
        """Set the sent flag. No-op for unknown fingerprints."""
        reminder = self._reminders.get(fingerprint)
        if reminder is not None:
            reminder.sent = True

    def is_sent(self, fingerprint: str) -> bool:
        reminder = self._reminders.get(fingerprint)
        return reminder is not None and reminder.sent

    def get(self, fingerprint: str) -> Optional[ScheduledReminder]:
        return self._reminders.get(fingerprint)

    def attach_timer(self, fingerprint: str, timer: asyncio.Task) -> None:
        reminder = self._reminders.get(fingerprint)
        if reminder is None:
            timer.cancel()
            return
        reminder.timer = timer

    def release_timer(self, fingerprint: str, timer: asyncio.Task) -> None:
        """Drop the timer handle if it still belongs to this fingerprint."""
        reminder = self._reminders.get(fingerprint)
        if reminder is not None and reminder.timer is timer:
            reminder.timer = None

    def cancel_timer(self, fingerprint: str) -> None:
        """Stop a pending timer, e.g. after the sweep already delivered."""
        reminder = self._reminders.get(fingerprint)
        if reminder is None or reminder.timer is None:
            return
        if reminder.timer is not asyncio.current_task() and not reminder.timer.done():
            reminder.timer.cancel()
        reminder.timer = None

    def clear(self, keep_sent: bool = False) -> None:
        """
        Cancel every live timer and empty the table.

        Args:
            keep_sent: Keep records already marked sent, so a same-day
                reload or restart cannot send them again
        """
        current = asyncio.current_task() if _loop_running() else None
        cancelled = 0
        for reminder in self._reminders.values():
            timer = reminder.timer
            if timer is not None and timer is not current and not timer.done():
                timer.cancel()
                cancelled += 1
            reminder.timer = None

        kept = {
            fingerprint: reminder
            for fingerprint, reminder in self._reminders.items()
            if keep_sent and reminder.sent
        }
        if self._reminders:
            logger.info(
                f"Cleared {len(self._reminders) - len(kept)} reminder(s), "
                f"kept {len(kept)} sent, cancelled {cancelled} timer(s)"
            )
        self._reminders = kept

    def count(self) -> int:
        return len(self._reminders)

    def list(self) -> list[ScheduledReminder]:
        return list(self._reminders.values())

    def __len__(self) -> int:
        return len(self._reminders)


def _loop_running() -> bool:
    try:
        asyncio.get_running_loop()
        return True
    except RuntimeError:
        return False
