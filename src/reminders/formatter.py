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
Message Formatter Module

Renders reminder text from a template or the default layout.
Supported template placeholders:
    {subject} {type} {location} {time} {activity} {minutesBefore}
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .models import TimeSlotEntry


@dataclass(frozen=True)
class ActivityCategory:
    """Best-effort classification of an activity. Not authoritative."""

    subject: str
    type: str
    location: str


# (keywords, type, location), first match wins
CATEGORY_RULES: list[tuple[tuple[str, ...], str, str]] = [
    (("prayer",), "Prayer", "Home"),
    (("gym",), "Exercise", "GYM"),
    (("work", "office"), "Work", "Office"),
    (("read", "quran"), "Study", "Home"),
    (("walk",), "Exercise", "Outdoor"),
    (("family",), "Personal", "Home"),
    (("meet", "coffee"), "Social", "Meeting Place"),
    (("rest", "sleep"), "Rest", "Home"),
]

# Locations recognised in the detail part of "Subject: detail" activities
DETAIL_LOCATIONS = [
    ("gym", "GYM"),
    ("home", "Home"),
    ("office", "Office"),
]

DEFAULT_TYPE = "Activity"
DEFAULT_LOCATION = "Scheduled Location"

_PLACEHOLDER = re.compile(r"\{(subject|type|location|time|activity|minutesBefore)\}")

Categorizer = Callable[[str], ActivityCategory]


def categorize_activity(
    activity: str,
    rules: list[tuple[tuple[str, ...], str, str]] = CATEGORY_RULES,
) -> ActivityCategory:
    """
    Infer subject, type and location from activity text by keyword matching.

    Args:
        activity: Activity description, optionally "Subject: detail"
        rules: Keyword table, first matching rule wins

    Returns:
        ActivityCategory with defaults where nothing matched
    """
    subject = activity
    type_ = DEFAULT_TYPE
    location = DEFAULT_LOCATION

    if ":" in activity:
        head, _, detail = activity.partition(":")
        subject = head.strip() or activity
        detail = detail.strip().lower()
        for keyword, detail_location in DETAIL_LOCATIONS:
            if keyword in detail:
                location = detail_location
                break

    activity_lower = activity.lower()
    for keywords, rule_type, rule_location in rules:
        if any(keyword in activity_lower for keyword in keywords):
            type_ = rule_type
            location = rule_location
            break

    return ActivityCategory(subject=subject, type=type_, location=location)


def format_time(instant: datetime) -> str:
    """Format as "5:00 AM"."""
    return instant.strftime("%I:%M %p").lstrip("0")


def format_reminder(
    entry: TimeSlotEntry,
    lead_minutes: int,
    template: Optional[str] = None,
    categorize: Categorizer = categorize_activity,
) -> str:
    """
    Render the reminder text for an entry.

    Output depends only on the arguments, never on the current time.

    Args:
        entry: Timetable entry being reminded about
        lead_minutes: Minutes between the reminder and the activity start
        template: Optional template with placeholders
        categorize: Classifier used for {subject}, {type} and {location}

    Returns:
        Message body
    """
    start_time = format_time(entry.start)
    activity = entry.description

    if template:
        category = categorize(activity)
        values = {
            "subject": category.subject,
            "type": category.type,
            "location": category.location,
            "minutesBefore": str(lead_minutes),
            "time": start_time,
            "activity": activity,
        }
        # Single pass, so substituted text is never re-expanded
        return _PLACEHOLDER.sub(lambda match: values[match.group(1)], template)

    return (
        f'REMINDER: Your "{activity}" is starting in {lead_minutes} minutes '
        f"at {start_time}.\n"
        f"\n"
        f"Time Slot: {entry.label}\n"
        f"Activity: {activity}\n"
        f"\n"
        f"Have a productive session!"
    )
