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
Reminder Configuration

Values can be overridden via environment variables.
"""

import os
from dataclasses import dataclass
from typing import Optional

import pytz

MAX_MINUTES_BEFORE = 120


def validate_timezone(tz_name: str) -> bool:
    """
    Validate that a timezone name is valid.

    Args:
        tz_name: IANA timezone name (e.g., "Asia/Karachi")

    Returns:
        True if valid, False otherwise
    """
    try:
        pytz.timezone(tz_name)
        return True
    except pytz.UnknownTimeZoneError:
        return False


@dataclass
class ReminderConfig:
    """Configuration for the reminder engine."""

    minutes_before: int = 15
    message_template: Optional[str] = None
    recipient: str = ""
    timezone: str = "UTC"
    timetable_file: str = "timetable.csv"

    # Fallback sweep interval
    sweep_interval_seconds: int = 60

    use_mock_transport: bool = False

    @classmethod
    def from_env(cls) -> "ReminderConfig":
        """Create config from environment variables with defaults."""
        return cls(
            minutes_before=int(os.getenv("REMINDER_MINUTES_BEFORE", "15")),
            message_template=os.getenv("CUSTOM_REMINDER_MESSAGE") or None,
            recipient=os.getenv("RECIPIENT_PHONE")
            or os.getenv("WHATSAPP_PHONE_NUMBER", ""),
            timezone=os.getenv("REMINDER_TIMEZONE", "UTC"),
            timetable_file=os.getenv("TIMETABLE_FILE", "timetable.csv"),
            sweep_interval_seconds=int(os.getenv("REMINDER_SWEEP_INTERVAL", "60")),
            use_mock_transport=os.getenv("USE_MOCK_WHATSAPP", "false").lower()
            == "true",
        )

    @property
    def tz(self) -> pytz.BaseTzInfo:
        return pytz.timezone(self.timezone)

    def validate(self) -> list[str]:
        """Return a list of configuration problems (empty when valid)."""
        errors = []

        if not self.timetable_file or not self.timetable_file.strip():
            errors.append("Timetable file path is required")

        if self.minutes_before < 0 or self.minutes_before > MAX_MINUTES_BEFORE:
            errors.append(
                f"Reminder minutes should be between 0 and {MAX_MINUTES_BEFORE}"
            )

        if not self.recipient or not self.recipient.strip():
            errors.append("Recipient phone number is required")

        if not validate_timezone(self.timezone):
            errors.append(f"Unknown timezone: {self.timezone}")

        if self.sweep_interval_seconds < 1:
            errors.append("Sweep interval must be at least 1 second")

        return errors
