from abc import ABC, abstractmethod


class MessagePlatformPort(ABC):
    @abstractmethod
    def send_text(self, recipient_id: str, text: str) -> None:
        """Deliver a text message. Raises on delivery failure."""
        raise NotImplementedError
