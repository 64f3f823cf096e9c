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

"""Shared fakes for reminder tests: clock, timers, entry source, transport."""

import asyncio
import os
import sys
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Optional

import pytz

# Keep analytics from trying to reach a database
os.environ.setdefault("ANALYTICS_ENABLED", "false")

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from reminders.interfaces import EntrySource, SendResult, Transport
from reminders.models import TimeSlotEntry

TZ = pytz.timezone("Asia/Karachi")
DAY = date(2025, 3, 10)


def at(hour: int, minute: int = 0, day: date = DAY) -> datetime:
    return TZ.localize(datetime.combine(day, time(hour, minute)))


def make_entry(
    label: str = "5:00 AM to 5:30 AM",
    description: str = "Morning Walk",
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> TimeSlotEntry:
    start = start or at(5, 0)
    return TimeSlotEntry(
        label=label,
        description=description,
        start=start,
        end=end or start + timedelta(minutes=30),
    )


async def settle(rounds: int = 20) -> None:
    """Let scheduled tasks run until they block again."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FakeTimers:
    """sleep_until replacement released explicitly by advance_to()."""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.pending: list[tuple[datetime, asyncio.Future]] = []

    async def sleep_until(self, when: datetime) -> None:
        future = asyncio.get_running_loop().create_future()
        self.pending.append((when, future))
        await future

    def waiting_until(self) -> list[datetime]:
        return [when for when, future in self.pending if not future.done()]

    async def advance_to(self, when: datetime) -> None:
        await settle()
        self.clock.now = when
        for due, future in self.pending:
            if due <= when and not future.done():
                future.set_result(None)
        self.pending = [(d, f) for d, f in self.pending if not f.done()]
        await settle()


class FakeSource(EntrySource):
    """
    In-memory timetable of (label, description, start time, end time) rows,
    resolved against the clock's current date like the CSV parser does.
    """

    def __init__(self, clock: FakeClock, rows: list[tuple[str, str, time, time]]):
        self.clock = clock
        self.rows = rows
        self.fail = False

    def _resolve(self) -> list[TimeSlotEntry]:
        today = self.clock().date()
        return [
            TimeSlotEntry(
                label=label,
                description=description,
                start=TZ.localize(datetime.combine(today, start)),
                end=TZ.localize(datetime.combine(today, end)),
            )
            for label, description, start, end in self.rows
        ]

    async def todays_entries(self) -> list[TimeSlotEntry]:
        if self.fail:
            raise OSError("timetable unreadable")
        return self._resolve()

    async def entries_starting_within(self, minutes: int) -> list[TimeSlotEntry]:
        window_start = self.clock().replace(second=0, microsecond=0)
        window_end = window_start + timedelta(minutes=minutes)
        return [e for e in self._resolve() if window_start <= e.start <= window_end]


class RecordingTransport(Transport):
    """Transport that records every send; optionally blocks on a gate."""

    def __init__(self, success: bool = True, error: Optional[Exception] = None):
        self.success = success
        self.error = error
        self.gate: Optional[asyncio.Event] = None
        self.calls: list[tuple[str, str]] = []
        self.connected = False

    async def initialize(self) -> None:
        self.connected = True

    def is_connected(self) -> bool:
        return self.connected

    async def send(self, recipient: str, text: str) -> SendResult:
        self.calls.append((recipient, text))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return SendResult(
            success=self.success,
            recipient=recipient,
            message=text,
            error=None if self.success else "delivery failed",
        )


WALK_ROW = ("5:00 AM to 5:30 AM", "Morning Walk", time(5, 0), time(5, 30))
GYM_ROW = ("6:00 PM to 7:00 PM", "Gym: strength session", time(18, 0), time(19, 0))
