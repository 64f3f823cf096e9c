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
Reminder service entry point.

Loads configuration from the environment (and .env), then runs the reminder
engine until the process is interrupted.
"""

import asyncio
import logging
import sys

from dotenv import load_dotenv

import analytics
from reminders import ReminderConfig, ReminderEngine
from timetable import TimetableParser
from transport import create_transport

load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("reminderbot")


async def run(config: ReminderConfig) -> None:
    """Run the engine until cancelled."""
    source = TimetableParser(config.timetable_file, config.tz)
    if not source.validate_file():
        logger.warning(f"Timetable file not found: {config.timetable_file}")

    transport = create_transport(config)
    engine = ReminderEngine(source, transport, config)

    try:
        await engine.start()
        await asyncio.Event().wait()
    finally:
        if engine.is_running():
            await engine.stop()
        await transport.close()
        await analytics.shutdown()


def main() -> int:
    config = ReminderConfig.from_env()
    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(f"Config: {error}")
        return 1

    logger.info(f"Setup: TIMETABLE_FILE={config.timetable_file}")
    logger.info(f"Setup: REMINDER_MINUTES_BEFORE={config.minutes_before}")
    logger.info(f"Setup: REMINDER_TIMEZONE={config.timezone}")
    logger.info(
        f"Setup: CUSTOM_REMINDER_MESSAGE={'set' if config.message_template else 'default'}"
    )

    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
