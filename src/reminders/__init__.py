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
Timetable Reminders Package

Schedules time-triggered reminders for today's timetable entries, with a
fallback sweep and a daily rollover at local midnight.
"""

from .config import ReminderConfig, validate_timezone
from .engine import ReminderEngine
from .formatter import ActivityCategory, categorize_activity, format_reminder
from .interfaces import EntrySource, SendResult, Transport
from .models import ScheduledReminder, TimeSlotEntry, reminder_fingerprint
from .registry import ReminderRegistry

__all__ = [
    "ReminderConfig",
    "validate_timezone",
    "ReminderEngine",
    "ActivityCategory",
    "categorize_activity",
    "format_reminder",
    "EntrySource",
    "SendResult",
    "Transport",
    "ScheduledReminder",
    "TimeSlotEntry",
    "reminder_fingerprint",
    "ReminderRegistry",
]
