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
Reminder Delivery Module

The single send path shared by per-reminder timers and the fallback sweep.
"""

import logging
from datetime import datetime
from typing import Optional

from analytics import track

from .formatter import Categorizer, categorize_activity, format_reminder
from .interfaces import SendResult, Transport
from .models import TimeSlotEntry
from .registry import ReminderRegistry

logger = logging.getLogger("reminderbot.reminders.delivery")


class ReminderDelivery:
    """
    Formats and sends reminders through the transport.

    A send is claimed in the registry before the transport is awaited, so a
    second activation for the same fingerprint that runs while the first is
    still suspended sees it as sent. A failed send stays consumed; there is
    no automatic retry.
    """

    def __init__(
        self,
        registry: ReminderRegistry,
        transport: Transport,
        recipient: str,
        lead_minutes: int,
        template: Optional[str] = None,
        categorize: Categorizer = categorize_activity,
    ):
        self.registry = registry
        self.transport = transport
        self.recipient = recipient
        self.lead_minutes = lead_minutes
        self.template = template
        self.categorize = categorize

    def render(self, entry: TimeSlotEntry) -> str:
        return format_reminder(entry, self.lead_minutes, self.template, self.categorize)

    async def deliver(
        self,
        fingerprint: str,
        entry: TimeSlotEntry,
        fire_at: datetime,
        origin: str,
    ) -> bool:
        """
        Send one reminder unless its fingerprint was already sent today.

        Args:
            fingerprint: Reminder fingerprint
            entry: Timetable entry
            fire_at: Instant the reminder was due
            origin: "timer" or "sweep"

        Returns:
            True if the transport reported success
        """
        if not self.registry.claim(fingerprint, entry, fire_at, origin):
            logger.debug(f"Reminder {fingerprint} already sent, skipping ({origin})")
            return False

        if origin == "sweep":
            self.registry.cancel_timer(fingerprint)

        try:
            message = self.render(entry)
            result = await self.transport.send(self.recipient, message)
        except Exception as e:
            logger.error(
                f"Failed to deliver reminder for {entry.description}: {e}", exc_info=True
            )
            track(
                "reminder_delivery_error",
                fingerprint=fingerprint,
                origin=origin,
                properties={
                    "error_type": type(e).__name__,
                    "error_message": str(e)[:200],
                },
            )
            return False
        finally:
            self.registry.mark_sent(fingerprint)

        if result.success:
            logger.info(f"Reminder sent for: {entry.description} ({origin})")
            track("reminder_sent", fingerprint=fingerprint, origin=origin)
        else:
            logger.warning(
                f"Failed to send reminder for {entry.description}: {result.error}"
            )
            track(
                "reminder_send_failed",
                fingerprint=fingerprint,
                origin=origin,
                properties={"error_message": (result.error or "")[:200]},
            )
        return result.success

    async def send_now(self, entry: TimeSlotEntry) -> SendResult:
        """Send immediately without consulting or updating the registry."""
        logger.info(f"Sending test reminder for: {entry.description}")
        return await self.transport.send(self.recipient, self.render(entry))
