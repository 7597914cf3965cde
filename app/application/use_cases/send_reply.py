from __future__ import annotations

import logging

from app.application.ports.message_platform import MessagePlatformPort


class SendReplyUseCase:
    def __init__(self, platform: MessagePlatformPort, enabled: bool = True) -> None:
        self._platform = platform
        self._enabled = enabled
        self._logger = logging.getLogger(__name__)

    def execute(self, recipient_id: str, text: str) -> bool:
        """Send a reply. Returns True if actually sent, False if skipped or failed."""
        if not self._enabled:
            self._logger.info("WOULD_SEND_REPLY", extra={"thread_id": recipient_id, "reply_text": text})
            self._logger.info("AUTO_REPLY_ENABLED=false -> skipping send")
            return False
        try:
            self._platform.send_text(recipient_id=recipient_id, text=text)
        except Exception as e:
            # Delivery failures never roll back the conversation.
            self._logger.exception("Reply send failed", extra={"thread_id": recipient_id, "reason": str(e)})
            return False
        return True
