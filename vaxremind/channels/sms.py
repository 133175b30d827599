"""SMS delivery through the Africa's Talking messaging API."""

import re
from typing import Any, Optional

import httpx

from vaxremind.config import SmsSettings
from vaxremind.errors import FailureCause
from vaxremind.utils import logger

from .base import Channel, DeliveryChannel, DeliveryResult, MessageBody

PHONE_PATTERN = re.compile(r"^\+?\d{9,15}$")


def normalize_phone(destination: str) -> str:
    """Strip spaces, dashes and parentheses from a phone number."""
    return re.sub(r"[\s\-()]", "", destination)


class SmsChannel(DeliveryChannel):
    """Africa's Talking SMS channel."""

    channel = Channel.SMS

    API_URL = "https://api.africastalking.com/version1/messaging"
    SANDBOX_API_URL = "https://api.sandbox.africastalking.com/version1/messaging"

    def __init__(
        self,
        settings: SmsSettings,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize SMS channel.

        Args:
            settings: SMS credentials and timeout
            client: Shared HTTP client (default: a client per request)
        """
        self.settings = settings
        self._client = client

    @property
    def configured(self) -> bool:
        return self.settings.configured

    @property
    def api_url(self) -> str:
        if self.settings.username == "sandbox":
            return self.SANDBOX_API_URL
        return self.API_URL

    def is_valid_destination(self, destination: str) -> bool:
        return bool(PHONE_PATTERN.match(normalize_phone(destination)))

    async def _deliver(self, destination: str, body: MessageBody) -> DeliveryResult:
        headers = {
            "apiKey": self.settings.api_key,
            "Accept": "application/json",
        }
        payload = {
            "username": self.settings.username,
            "to": normalize_phone(destination),
            "message": body.text,
        }
        if self.settings.sender_id:
            payload["from"] = self.settings.sender_id

        try:
            if self._client is not None:
                response = await self._client.post(
                    self.api_url, headers=headers, data=payload, timeout=self.settings.timeout
                )
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.post(
                        self.api_url, headers=headers, data=payload, timeout=self.settings.timeout
                    )
        except httpx.TimeoutException as e:
            logger.warning(f"SMS provider timed out after {self.settings.timeout}s")
            return DeliveryResult.failed(FailureCause.TIMEOUT, f"{type(e).__name__}: {e}")
        except httpx.HTTPError as e:
            logger.warning(f"SMS provider request failed: {type(e).__name__}: {e}")
            return DeliveryResult.failed(FailureCause.PROVIDER_ERROR, f"{type(e).__name__}: {e}")

        if response.status_code >= 400:
            detail = f"HTTP {response.status_code}: {response.text[:200]}"
            logger.warning(f"SMS provider rejected request: {detail}")
            return DeliveryResult.failed(FailureCause.PROVIDER_ERROR, detail)

        try:
            data = response.json()
        except ValueError:
            return DeliveryResult.failed(
                FailureCause.PROVIDER_ERROR, f"Unexpected provider response: {response.text[:200]}"
            )

        return self._parse_response(data)

    def _parse_response(self, data: Any) -> DeliveryResult:
        """Map the provider's per-recipient status to a delivery result.

        Response shape:
            {"SMSMessageData": {"Message": "Sent to 1/1 Total Cost: KES 0.8000",
                                "Recipients": [{"status": "Success",
                                                "statusCode": 101,
                                                "messageId": "ATXid_..."}]}}
        """
        message_data = data.get("SMSMessageData", {}) if isinstance(data, dict) else {}
        recipients = message_data.get("Recipients") or []
        summary = message_data.get("Message", "")

        if not recipients:
            return DeliveryResult.failed(
                FailureCause.PROVIDER_ERROR, f"No recipients accepted: {summary}"
            )

        recipient = recipients[0]
        status = recipient.get("status", "")

        if status == "Success":
            return DeliveryResult.sent(provider_id=recipient.get("messageId"), detail=summary)
        if status == "InvalidPhoneNumber":
            return DeliveryResult.failed(FailureCause.INVALID_DESTINATION, status)
        return DeliveryResult.failed(
            FailureCause.PROVIDER_ERROR, f"{status} ({recipient.get('statusCode')})"
        )
