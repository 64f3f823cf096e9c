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

"""Tests for reminder message formatting."""

from conftest import at, make_entry
from reminders.formatter import (
    ActivityCategory,
    categorize_activity,
    format_reminder,
    format_time,
)


class TestCategorize:
    """Test keyword-based activity categorization."""

    def test_defaults(self):
        category = categorize_activity("Something unusual")
        assert category == ActivityCategory("Something unusual", "Activity", "Scheduled Location")

    def test_keyword_rules(self):
        assert categorize_activity("Fajr Prayer").type == "Prayer"
        assert categorize_activity("Morning Walk").location == "Outdoor"
        assert categorize_activity("Coffee with Ali").type == "Social"
        assert categorize_activity("Read Quran").location == "Home"
        assert categorize_activity("Office standup").type == "Work"

    def test_first_rule_wins(self):
        # "prayer" is listed before "walk"
        assert categorize_activity("Walk to prayer").type == "Prayer"

    def test_subject_and_detail_location(self):
        category = categorize_activity("Deep Study: at home")
        assert category.subject == "Deep Study"
        assert category.location == "Home"
        assert category.type == "Activity"

    def test_keyword_overrides_detail_location(self):
        category = categorize_activity("Gym: leg day")
        assert category.subject == "Gym"
        assert category.type == "Exercise"
        assert category.location == "GYM"

    def test_custom_rules(self):
        rules = [(("piano",), "Music", "Studio")]
        category = categorize_activity("Piano practice", rules=rules)
        assert category.type == "Music"
        assert category.location == "Studio"


class TestFormatReminder:
    """Test default layout and templates."""

    def test_format_time(self):
        assert format_time(at(5, 0)) == "5:00 AM"
        assert format_time(at(18, 30)) == "6:30 PM"

    def test_default_layout(self):
        message = format_reminder(make_entry(), 15)
        assert '"Morning Walk" is starting in 15 minutes at 5:00 AM' in message
        assert "Time Slot: 5:00 AM to 5:30 AM" in message
        assert "Activity: Morning Walk" in message
        assert len(message.splitlines()) > 1

    def test_template_placeholders(self):
        template = "{type} at {location}: {subject} ({activity}) at {time}, in {minutesBefore} min"
        message = format_reminder(make_entry(description="Gym: leg day"), 10, template)
        assert message == "Exercise at GYM: Gym (Gym: leg day) at 5:00 AM, in 10 min"

    def test_unknown_placeholder_left_alone(self):
        message = format_reminder(make_entry(), 15, "{activity} {unknown}")
        assert message == "Morning Walk {unknown}"

    def test_substituted_text_not_reexpanded(self):
        entry = make_entry(description="Write {time} notes")
        assert format_reminder(entry, 15, "{activity}") == "Write {time} notes"

    def test_repeated_placeholder(self):
        assert format_reminder(make_entry(), 5, "{time}/{time}") == "5:00 AM/5:00 AM"

    def test_deterministic(self):
        entry = make_entry()
        template = "{subject} {type} {location} {time} {minutesBefore}"
        assert format_reminder(entry, 15) == format_reminder(entry, 15)
        assert format_reminder(entry, 15, template) == format_reminder(entry, 15, template)

    def test_swappable_categorizer(self):
        def categorize(activity):
            return ActivityCategory(subject="S", type="T", location="L")

        message = format_reminder(make_entry(), 15, "{subject}|{type}|{location}", categorize)
        assert message == "S|T|L"

    def test_empty_template_uses_default(self):
        assert format_reminder(make_entry(), 15, "") == format_reminder(make_entry(), 15)
