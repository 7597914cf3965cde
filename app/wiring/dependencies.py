from datetime import timedelta
from functools import lru_cache
import logging

from app.core.config import settings
from app.application.ports.appointment_store import AppointmentStorePort
from app.application.ports.conversation_store import ConversationStorePort
from app.application.ports.message_platform import MessagePlatformPort
from app.application.ports.salon_config import SalonConfigPort
from app.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase
from app.application.use_cases.send_reply import SendReplyUseCase
from app.application.utils.message_rules import IntentTokens
from app.infrastructure.config.json_salon_config import JsonSalonConfigStore
from app.infrastructure.store.json_store import JsonAppointmentStore
from app.infrastructure.store.memory_store import MemoryConversationStore
from app.infrastructure.whatsapp.mock_platform import MockWhatsAppPlatform
from app.infrastructure.whatsapp.whatsapp_client import WhatsAppClient
from app.infrastructure.whatsapp.whatsapp_platform import WhatsAppPlatform


@lru_cache
def get_conversation_store() -> ConversationStorePort:
    return MemoryConversationStore()


@lru_cache
def get_appointment_store() -> AppointmentStorePort:
    return JsonAppointmentStore(path=settings.APPOINTMENTS_PATH)


@lru_cache
def get_salon_config() -> SalonConfigPort:
    return JsonSalonConfigStore(path=settings.SALON_CONFIG_PATH)


@lru_cache
def get_whatsapp_platform() -> MessagePlatformPort:
    logger = logging.getLogger(__name__)
    logger.info(
        "WHATSAPP_ACCESS_TOKEN present=%s len=%s",
        bool(settings.WHATSAPP_ACCESS_TOKEN),
        len(settings.WHATSAPP_ACCESS_TOKEN or ""),
    )
    logger.info("ENV=%s", settings.ENV)

    if not settings.WHATSAPP_ACCESS_TOKEN or not settings.WHATSAPP_PHONE_NUMBER_ID:
        if settings.ENV.lower() in {"dev", "local"}:
            logger.info("Using MockWhatsAppPlatform (credentials missing, ENV=dev/local)")
            return MockWhatsAppPlatform()
        raise ValueError("WHATSAPP_ACCESS_TOKEN and WHATSAPP_PHONE_NUMBER_ID are required to send WhatsApp replies.")

    logger.info("Using real WhatsAppPlatform")
    client = WhatsAppClient(
        access_token=settings.WHATSAPP_ACCESS_TOKEN,
        phone_number_id=settings.WHATSAPP_PHONE_NUMBER_ID,
        graph_api_version=settings.WHATSAPP_GRAPH_API_VERSION,
    )
    return WhatsAppPlatform(client=client)


def get_intent_tokens() -> IntentTokens:
    return IntentTokens.from_lists(
        affirmative=settings.AFFIRMATIVE_TOKENS,
        confirm=settings.CONFIRM_TOKENS,
        reject=settings.REJECT_TOKENS,
        any_staff=settings.ANY_STAFF_TOKENS,
    )


@lru_cache
def get_handle_incoming_message_use_case() -> HandleIncomingMessageUseCase:
    idle_minutes = settings.CONVERSATION_IDLE_TIMEOUT_MINUTES
    return HandleIncomingMessageUseCase(
        conversations=get_conversation_store(),
        appointments=get_appointment_store(),
        salon_config=get_salon_config(),
        send_reply=SendReplyUseCase(platform=get_whatsapp_platform(), enabled=settings.AUTO_REPLY_ENABLED),
        tokens=get_intent_tokens(),
        idle_timeout=timedelta(minutes=idle_minutes) if idle_minutes > 0 else None,
        suggestion_limit=settings.SLOT_SUGGESTION_LIMIT,
    )


def get_container() -> dict[str, object]:
    return {
        "use_case": get_handle_incoming_message_use_case(),
        "store": get_conversation_store(),
        "appointments": get_appointment_store(),
        "salon_config": get_salon_config(),
    }
