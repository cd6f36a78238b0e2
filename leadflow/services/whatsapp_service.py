import logging
import re
from datetime import datetime

import requests
from flask import current_app

from leadflow.errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://graph.facebook.com/v18.0"


def normalize_phone(phone):
    """
    Reduce a phone number to the digits the Cloud API expects.

    Non-digits and leading zeros are dropped; a bare 10-digit number gets
    the "1" country code.
    """
    digits = re.sub(r"\D", "", str(phone or ""))
    digits = digits.lstrip("0")
    if len(digits) == 10:
        digits = "1" + digits
    return digits


class WhatsAppClient:
    """Outbound messaging transport backed by the WhatsApp Cloud API."""

    def __init__(self, api_key, phone_number_id, base_url=DEFAULT_BASE_URL, timeout=10):
        self.api_key = api_key
        self.phone_number_id = phone_number_id
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_config(cls, config=None):
        config = config if config is not None else current_app.config
        return cls(
            api_key=config.get("WHATSAPP_API_KEY", ""),
            phone_number_id=config.get("WHATSAPP_PHONE_NUMBER_ID", ""),
            base_url=config.get("WHATSAPP_BASE_URL", DEFAULT_BASE_URL),
            timeout=config.get("WHATSAPP_TIMEOUT_SECONDS", 10),
        )

    @property
    def messages_url(self):
        return f"{self.base_url}/{self.phone_number_id}/messages"

    def send_message(self, phone, message):
        payload = {
            "messaging_product": "whatsapp",
            "to": normalize_phone(phone),
            "type": "text",
            "text": {"body": message},
        }
        return self._post(payload)

    def send_template(self, phone, template_name, components=None, language="en_US"):
        template = {
            "name": template_name,
            "language": {"code": language},
        }
        if components:
            template["components"] = components

        payload = {
            "messaging_product": "whatsapp",
            "to": normalize_phone(phone),
            "type": "template",
            "template": template,
        }
        return self._post(payload)

    def _post(self, payload):
        if not self.api_key or not self.phone_number_id:
            raise TransportError("WhatsApp API is not configured")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = requests.post(
                self.messages_url,
                headers=headers,
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"WhatsApp request failed: {e}", extra={"to": payload["to"]})
            raise TransportError(f"WhatsApp API error: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if not response.ok:
            error = data.get("error") or {}
            message = error.get("message") or f"HTTP {response.status_code}"
            logger.error(
                "WhatsApp API rejected message",
                extra={"to": payload["to"], "status_code": response.status_code},
            )
            raise TransportError(f"WhatsApp API error: {message}", status_code=response.status_code)

        messages = data.get("messages") or [{}]
        result = {
            "status": "sent",
            "message_id": messages[0].get("id"),
            "timestamp": datetime.utcnow().isoformat(),
        }
        logger.info(
            "WhatsApp message sent",
            extra={"to": payload["to"], "message_id": result["message_id"]},
        )
        return result
