from __future__ import annotations

import logging

import httpx


class WhatsAppClient:
    def __init__(
        self,
        access_token: str,
        phone_number_id: str,
        graph_api_version: str = "v18.0",
        base_url: str = "https://graph.facebook.com",
    ) -> None:
        self._access_token = access_token
        self._send_endpoint = f"{base_url}/{graph_api_version}/{phone_number_id}/messages"
        self._client = httpx.Client(timeout=10.0)
        self._logger = logging.getLogger(__name__)

    def send_text(self, recipient_id: str, text: str) -> None:
        payload = {
            "messaging_product": "whatsapp",
            "to": recipient_id,
            "type": "text",
            "text": {"body": text},
        }
        headers = {"Authorization": f"Bearer {self._access_token}"}
        resp = self._client.post(self._send_endpoint, headers=headers, json=payload)
        if resp.status_code >= 400:
            error_body = resp.text
            try:
                error_json = resp.json()
                error_code = error_json.get("error", {}).get("code")
                error_message = error_json.get("error", {}).get("message")
            except ValueError:
                error_code = None
                error_message = error_body

            self._logger.error(
                "WhatsApp send failed",
                extra={
                    "status": resp.status_code,
                    "error_code": error_code,
                    "error_message": error_message,
                    "recipient_id": recipient_id,
                    "text_length": len(text),
                },
            )
            resp.raise_for_status()
