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
Transport Package

Message transports for reminder delivery.
"""

import logging
import os

from reminders.config import ReminderConfig
from reminders.interfaces import Transport

from .mock import MockTransport
from .whatsapp import WhatsAppBusinessTransport

logger = logging.getLogger("reminderbot.transport")


def create_transport(config: ReminderConfig) -> Transport:
    """Mock when requested or when no WhatsApp access token is configured."""
    if config.use_mock_transport:
        logger.info("Using mock transport")
        return MockTransport()

    if not os.getenv("WHATSAPP_ACCESS_TOKEN"):
        logger.warning("WHATSAPP_ACCESS_TOKEN not set - falling back to mock transport")
        return MockTransport()

    logger.info("Using WhatsApp Business transport")
    return WhatsAppBusinessTransport()


__all__ = ["MockTransport", "WhatsAppBusinessTransport", "create_transport"]
