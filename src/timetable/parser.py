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
Timetable Parser Module

Reads a daily timetable CSV with "Time Slot" and "Activity" columns, e.g.

    Time Slot,Activity
    5:00 AM to 5:30 AM,Morning Walk

and resolves every slot against today's date in the configured timezone.
Rows that cannot be parsed are skipped with a warning.
"""

import csv
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Callable, Optional

import pytz

from reminders.formatter import format_time
from reminders.interfaces import EntrySource
from reminders.models import TimeSlotEntry

logger = logging.getLogger("reminderbot.timetable.parser")

TIME_SLOT_COLUMN = "Time Slot"
ACTIVITY_COLUMN = "Activity"

TIME_SLOT_PATTERN = re.compile(
    r"(\d{1,2}:\d{2}\s*(?:AM|PM))\s*to\s*(\d{1,2}:\d{2}\s*(?:AM|PM))",
    re.IGNORECASE,
)


@dataclass
class ParsedTimetable:
    """Entries parsed from the timetable plus summary metadata."""

    entries: list[TimeSlotEntry]
    total_entries: int
    date_range: str
    last_updated: datetime


def _parse_clock_time(text: str) -> datetime:
    return datetime.strptime(re.sub(r"\s+", "", text).upper(), "%I:%M%p")


class TimetableParser(EntrySource):
    """Entry source backed by a CSV timetable file."""

    def __init__(
        self,
        timetable_file: str,
        tz: pytz.BaseTzInfo,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the parser.

        Args:
            timetable_file: Path to the CSV file
            tz: Timezone the timetable is expressed in
            clock: Returns the current aware time (defaults to now in tz)
        """
        self.timetable_file = Path(timetable_file)
        self.tz = tz
        self._clock = clock or (lambda: datetime.now(tz))

    def validate_file(self) -> bool:
        return self.timetable_file.is_file()

    def parse_time_slot(
        self, time_slot: str, activity: str, day: date
    ) -> Optional[TimeSlotEntry]:
        """
        Parse one row into an entry on the given day.

        Args:
            time_slot: e.g. "5:00 AM to 5:30 AM"
            activity: Activity text
            day: Local date the slot belongs to

        Returns:
            TimeSlotEntry, or None if the slot could not be parsed
        """
        match = TIME_SLOT_PATTERN.search(time_slot or "")
        if not match:
            logger.warning(f"Could not parse time slot: {time_slot}")
            return None

        try:
            start_clock = _parse_clock_time(match.group(1))
            end_clock = _parse_clock_time(match.group(2))
        except ValueError as e:
            logger.warning(f'Error parsing time slot "{time_slot}": {e}')
            return None

        start = self.tz.localize(datetime.combine(day, start_clock.time()))
        end = self.tz.localize(datetime.combine(day, end_clock.time()))

        # Slot runs past midnight, e.g. 11:00 PM to 1:00 AM
        if end < start:
            end = self.tz.localize(
                datetime.combine(day + timedelta(days=1), end_clock.time())
            )

        return TimeSlotEntry(
            label=time_slot.strip(),
            description=(activity or "").strip(),
            start=start,
            end=end,
        )

    def parse_timetable(self) -> ParsedTimetable:
        """
        Read and parse the whole timetable for today.

        Raises:
            OSError: If the file cannot be read
        """
        now = self._clock().astimezone(self.tz)
        today = now.date()
        entries = []

        with self.timetable_file.open(newline="", encoding="utf-8-sig") as f:
            for row in csv.DictReader(f):
                entry = self.parse_time_slot(
                    row.get(TIME_SLOT_COLUMN) or "",
                    row.get(ACTIVITY_COLUMN) or "",
                    today,
                )
                if entry is not None:
                    entries.append(entry)

        return ParsedTimetable(
            entries=entries,
            total_entries=len(entries),
            date_range=self._date_range(entries),
            last_updated=now,
        )

    @staticmethod
    def _date_range(entries: list[TimeSlotEntry]) -> str:
        if not entries:
            return "No entries"
        starts = [entry.start for entry in entries]
        return f"{format_time(min(starts))} - {format_time(max(starts))}"

    async def todays_entries(self) -> list[TimeSlotEntry]:
        today = self._clock().astimezone(self.tz).date()
        timetable = self.parse_timetable()
        return [
            entry
            for entry in timetable.entries
            if entry.start.astimezone(self.tz).date() == today
        ]

    async def entries_starting_within(self, minutes: int) -> list[TimeSlotEntry]:
        window_start = self._clock().replace(second=0, microsecond=0)
        window_end = window_start + timedelta(minutes=minutes)
        return [
            entry
            for entry in await self.todays_entries()
            if window_start <= entry.start <= window_end
        ]
