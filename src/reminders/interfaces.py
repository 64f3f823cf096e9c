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
Collaborator Contracts

The engine consumes an entry source and a transport; concrete implementations
live in the timetable and transport packages.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from .models import TimeSlotEntry


@dataclass
class SendResult:
    """Outcome of a single transport send."""

    success: bool
    recipient: str
    message: str
    error: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class EntrySource(ABC):
    """Produces today's timetable entries, resolved to absolute local instants."""

    @abstractmethod
    async def todays_entries(self) -> list[TimeSlotEntry]:
        """Return today's entries in timetable order."""

    @abstractmethod
    async def entries_starting_within(self, minutes: int) -> list[TimeSlotEntry]:
        """Return today's entries starting between now and now + minutes."""


class Transport(ABC):
    """
    Delivers a message body to a recipient address.

    send() reports ordinary delivery failures through SendResult and only
    raises for programmer errors such as sending before initialize().
    """

    @abstractmethod
    async def initialize(self) -> None:
        ...

    @abstractmethod
    def is_connected(self) -> bool:
        ...

    @abstractmethod
    async def send(self, recipient: str, text: str) -> SendResult:
        ...

    async def close(self) -> None:
        """Release any held resources."""
