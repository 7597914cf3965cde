import logging

from fastapi import FastAPI

from app.api.webhooks import router as webhooks_router
from app.core.config import settings

CONTEXT_KEYS = (
    "message_id",
    "thread_id",
    "recipient_id",
    "step",
    "next_step",
    "appointment_id",
    "service",
    "staff",
    "date",
    "time",
    "reason",
    "status",
    "error_code",
    "path",
    "count",
    "index",
    "keys",
    "services",
    "message_count",
    "reply_text",
)


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in CONTEXT_KEYS:
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(asctime)s %(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title="Salon Booking Assistant", version="1.0.0")

app.include_router(webhooks_router, tags=["webhooks"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
