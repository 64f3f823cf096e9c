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
Reminder Models

Value types shared by the registry, scheduler and sweep.
"""

import asyncio
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

# Number of normalized description characters that take part in the fingerprint
DESCRIPTION_PREFIX_LENGTH = 20

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class TimeSlotEntry:
    """One planned activity occurrence, already resolved to today's date."""

    label: str  # e.g. "5:00 AM to 5:30 AM"
    description: str
    start: datetime
    end: datetime


def _normalize(text: str) -> str:
    return _WHITESPACE.sub("", text).lower()


def reminder_fingerprint(label: str, description: str) -> str:
    """
    Build the dedup key for a reminder occurrence.

    Whitespace is removed and text lowercased before the description is cut
    to its first DESCRIPTION_PREFIX_LENGTH characters, so spacing or case
    changes never produce a new key.

    Args:
        label: Time slot label
        description: Activity text

    Returns:
        Fingerprint string "<label>-<description prefix>"
    """
    label_key = _normalize(label)
    description_key = _normalize(description)[:DESCRIPTION_PREFIX_LENGTH]
    return f"{label_key}-{description_key}"


def fingerprint_for(entry: TimeSlotEntry) -> str:
    return reminder_fingerprint(entry.label, entry.description)


@dataclass
class ScheduledReminder:
    """Registry-owned record of one reminder for the current day."""

    fingerprint: str
    entry: TimeSlotEntry
    fire_at: datetime
    timer: Optional[asyncio.Task] = None
    sent: bool = False
    origin: str = "timer"  # "timer" or "sweep"

    @property
    def timer_active(self) -> bool:
        return self.timer is not None and not self.timer.done()

    def to_dict(self) -> dict:
        """Read-only view for status reporting."""
        return {
            "fingerprint": self.fingerprint,
            "label": self.entry.label,
            "description": self.entry.description,
            "start": self.entry.start.isoformat(),
            "fire_at": self.fire_at.isoformat(),
            "sent": self.sent,
            "origin": self.origin,
            "timer_active": self.timer_active,
        }
