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
WhatsApp Business Transport

Sends reminder text through the WhatsApp Business Cloud API.
"""

import logging
import os
import re
from typing import Optional

import httpx

from reminders.interfaces import SendResult, Transport

logger = logging.getLogger("reminderbot.transport.whatsapp")

GRAPH_API_URL = "https://graph.facebook.com"


class WhatsAppBusinessTransport(Transport):
    """Client for the WhatsApp Business Cloud API (text messages only)"""

    def __init__(
        self,
        access_token: Optional[str] = None,
        phone_number_id: Optional[str] = None,
        api_version: Optional[str] = None,
        default_country_code: Optional[str] = None,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.access_token = access_token or os.getenv("WHATSAPP_ACCESS_TOKEN")
        self.phone_number_id = phone_number_id or os.getenv("WHATSAPP_PHONE_NUMBER_ID")
        self.api_version = api_version or os.getenv("WHATSAPP_API_VERSION", "v21.0")
        self.default_country_code = default_country_code or os.getenv(
            "WHATSAPP_DEFAULT_COUNTRY_CODE", "92"
        )
        self._ready = False

        if not self.access_token:
            logger.warning(
                "WHATSAPP_ACCESS_TOKEN not set - message delivery will fail authentication"
            )

        self._client = httpx.AsyncClient(
            base_url=f"{GRAPH_API_URL}/{self.api_version}/{self.phone_number_id}",
            headers={
                "Authorization": f"Bearer {self.access_token}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def initialize(self) -> None:
        """
        Validate credentials and probe the phone number endpoint.

        Raises:
            RuntimeError: If credentials are missing
            httpx.HTTPError: If the API cannot be reached
        """
        if not self.access_token:
            raise RuntimeError("WhatsApp Business access token is required")
        if not self.phone_number_id:
            raise RuntimeError("WhatsApp Business phone number ID is required")

        response = await self._client.get("")
        response.raise_for_status()
        self._ready = True
        logger.info("WhatsApp Business transport initialized")

    def is_connected(self) -> bool:
        return self._ready

    def format_phone_number(self, phone_number: str) -> str:
        """
        Normalize a phone number to digits with a country code.

        Args:
            phone_number: Number in any common notation

        Returns:
            Digits only, e.g. "923001234567"
        """
        digits = re.sub(r"[^0-9]", "", phone_number)
        code = self.default_country_code
        if len(digits) == 10 and not digits.startswith(code):
            digits = code + digits
        elif len(digits) == 11 and digits.startswith("0"):
            digits = code + digits[1:]
        return digits

    async def send(self, recipient: str, text: str) -> SendResult:
        if not self._ready:
            raise RuntimeError("Transport not initialized. Call initialize() first.")

        payload = {
            "messaging_product": "whatsapp",
            "to": self.format_phone_number(recipient),
            "type": "text",
            "text": {"body": text},
        }

        try:
            response = await self._client.post("/messages", json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            error_body = ""
            try:
                error_body = e.response.json().get("error", {}).get("message", "")
            except Exception:
                error_body = e.response.text[:200]
            error = f"HTTP {e.response.status_code}: {error_body}"
            logger.error(f"Failed to send WhatsApp message ({error})")
            return SendResult(success=False, recipient=recipient, message=text, error=error)
        except httpx.TimeoutException as e:
            logger.error(f"WhatsApp send timed out: {e}")
            return SendResult(
                success=False, recipient=recipient, message=text, error="timeout"
            )
        except httpx.HTTPError as e:
            logger.error(f"Failed to send WhatsApp message: {e}")
            return SendResult(success=False, recipient=recipient, message=text, error=str(e))

        return SendResult(success=True, recipient=recipient, message=text)

    async def close(self) -> None:
        """Close the HTTP client"""
        self._ready = False
        await self._client.aclose()
