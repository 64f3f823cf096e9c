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

"""Tests for the CSV timetable entry source."""

from datetime import timedelta

import pytest

from conftest import DAY, TZ, FakeClock, at
from timetable.parser import TimetableParser

TIMETABLE_CSV = """Time Slot,Activity
5:00 AM to 5:30 AM,Morning Walk
6:00 AM to 7:00 AM,  Read Quran
not a time slot,Broken row
11:00 PM to 1:00 AM,Night shift
12:00 PM to 12:30 PM,Lunch
"""


@pytest.fixture
def timetable_file(tmp_path):
    path = tmp_path / "timetable.csv"
    path.write_text(TIMETABLE_CSV, encoding="utf-8")
    return path


def make_parser(path, now=None):
    return TimetableParser(str(path), TZ, clock=FakeClock(now or at(4, 50)))


class TestParseTimeSlot:
    """Test single time slot parsing."""

    def test_basic_slot(self, tmp_path):
        parser = make_parser(tmp_path / "unused.csv")
        entry = parser.parse_time_slot("5:00 AM to 5:30 AM", " Morning Walk ", DAY)
        assert entry.label == "5:00 AM to 5:30 AM"
        assert entry.description == "Morning Walk"
        assert entry.start == at(5, 0)
        assert entry.end == at(5, 30)

    def test_lowercase_and_compact(self, tmp_path):
        parser = make_parser(tmp_path / "unused.csv")
        entry = parser.parse_time_slot("9:15am to 10:00pm", "Work", DAY)
        assert entry.start == at(9, 15)
        assert entry.end == at(22, 0)

    def test_noon_and_midnight(self, tmp_path):
        parser = make_parser(tmp_path / "unused.csv")
        entry = parser.parse_time_slot("12:00 AM to 12:30 PM", "Long sleep", DAY)
        assert entry.start == at(0, 0)
        assert entry.end == at(12, 30)

    def test_overnight_slot(self, tmp_path):
        parser = make_parser(tmp_path / "unused.csv")
        entry = parser.parse_time_slot("11:00 PM to 1:00 AM", "Night shift", DAY)
        assert entry.start == at(23, 0)
        assert entry.end == at(1, 0, DAY + timedelta(days=1))

    def test_unparseable(self, tmp_path):
        parser = make_parser(tmp_path / "unused.csv")
        assert parser.parse_time_slot("whenever", "Nap", DAY) is None
        assert parser.parse_time_slot("13:00 PM to 14:00 PM", "Nap", DAY) is None


class TestParseTimetable:
    """Test whole-file parsing."""

    def test_parse_skips_bad_rows(self, timetable_file):
        timetable = make_parser(timetable_file).parse_timetable()
        descriptions = [entry.description for entry in timetable.entries]
        assert descriptions == ["Morning Walk", "Read Quran", "Night shift", "Lunch"]
        assert timetable.total_entries == 4

    def test_metadata(self, timetable_file):
        timetable = make_parser(timetable_file).parse_timetable()
        assert timetable.date_range == "5:00 AM - 11:00 PM"
        assert timetable.last_updated == at(4, 50)

    def test_empty_timetable(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("Time Slot,Activity\n", encoding="utf-8")
        timetable = make_parser(path).parse_timetable()
        assert timetable.entries == []
        assert timetable.date_range == "No entries"

    def test_validate_file(self, timetable_file, tmp_path):
        assert make_parser(timetable_file).validate_file() is True
        assert make_parser(tmp_path / "missing.csv").validate_file() is False

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(OSError):
            make_parser(tmp_path / "missing.csv").parse_timetable()


class TestEntrySource:
    """Test the entry source contract."""

    @pytest.mark.asyncio
    async def test_todays_entries_resolved_to_today(self, timetable_file):
        entries = await make_parser(timetable_file).todays_entries()
        assert len(entries) == 4
        assert all(entry.start.date() == DAY for entry in entries)

    @pytest.mark.asyncio
    async def test_entries_starting_within(self, timetable_file):
        parser = make_parser(timetable_file, now=at(4, 50))
        upcoming = await parser.entries_starting_within(15)
        assert [entry.description for entry in upcoming] == ["Morning Walk"]

    @pytest.mark.asyncio
    async def test_window_is_inclusive(self, timetable_file):
        parser = make_parser(timetable_file, now=at(5, 45))
        upcoming = await parser.entries_starting_within(15)
        assert [entry.description for entry in upcoming] == ["Read Quran"]

    @pytest.mark.asyncio
    async def test_window_excludes_started(self, timetable_file):
        parser = make_parser(timetable_file, now=at(5, 1))
        assert await parser.entries_starting_within(15) == []
