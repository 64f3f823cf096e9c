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

"""Mock transport that logs and records messages instead of sending them."""

import logging
from collections import deque

from reminders.interfaces import SendResult, Transport

logger = logging.getLogger("reminderbot.transport.mock")


class MockTransport(Transport):
    """Keeps the most recent max_recorded messages for inspection."""

    def __init__(self, max_recorded: int = 100):
        self._connected = False
        self._sent: deque[SendResult] = deque(maxlen=max_recorded)

    async def initialize(self) -> None:
        self._connected = True
        logger.info("Mock transport initialized")

    def is_connected(self) -> bool:
        return self._connected

    async def send(self, recipient: str, text: str) -> SendResult:
        if not self._connected:
            raise RuntimeError("Transport not initialized. Call initialize() first.")

        result = SendResult(success=True, recipient=recipient, message=text)
        self._sent.append(result)
        logger.info(f"MOCK MESSAGE to {recipient}:\n{text}")
        return result

    async def close(self) -> None:
        self._connected = False
        logger.info("Mock transport disconnected")

    @property
    def sent_messages(self) -> list[SendResult]:
        return list(self._sent)

    @property
    def message_count(self) -> int:
        return len(self._sent)

    def clear_sent_messages(self) -> None:
        self._sent.clear()
