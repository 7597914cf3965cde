from dataclasses import dataclass


@dataclass(frozen=True)
class Message:
    id: str  # provider message id (wamid), used to drop redelivered webhooks
    thread_id: str
    sender_id: str  # customer's WhatsApp number
    text: str
    timestamp: int
    platform: str = "whatsapp"
