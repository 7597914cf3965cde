from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Callable, Iterator

from app.application.exceptions import PersistenceError
from app.application.ports.appointment_store import AppointmentStorePort
from app.application.ports.conversation_store import ConversationStorePort
from app.application.ports.salon_config import SalonConfigPort
from app.application.use_cases import reply_composer
from app.application.use_cases.availability import AvailabilityChecker
from app.application.use_cases.send_reply import SendReplyUseCase
from app.application.utils.date_parser import parse_date_time
from app.application.utils.ids import MonotonicIdGenerator
from app.application.utils.message_rules import (
    IntentTokens,
    extract_leading_int,
    is_affirmative,
    is_any_staff,
    is_confirmation,
    is_rejection,
)
from app.domain.entities.appointment import Appointment
from app.domain.entities.conversation_state import ConversationState, ConversationStep, PendingAppointment
from app.domain.entities.message import Message
from app.domain.entities.salon_config import ANY_STAFF, SalonConfig


@dataclass(frozen=True)
class BookingResult:
    ok: bool
    appointment: Appointment | None = None
    error: str | None = None


@dataclass(frozen=True)
class Transition:
    reply: str
    state: ConversationState | None  # None ends the conversation


class HandleIncomingMessageUseCase:
    """
    Per-sender booking dialogue.

    Every processed message produces exactly one reply. Messages from the same
    sender are handled one at a time; different senders never wait on each
    other except while an appointment is being written.
    """

    def __init__(
        self,
        conversations: ConversationStorePort,
        appointments: AppointmentStorePort,
        salon_config: SalonConfigPort,
        send_reply: SendReplyUseCase,
        tokens: IntentTokens | None = None,
        idle_timeout: timedelta | None = timedelta(minutes=120),
        suggestion_limit: int = 3,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._conversations = conversations
        self._appointments = appointments
        self._salon_config = salon_config
        self._send_reply = send_reply
        self._tokens = tokens or IntentTokens()
        self._idle_timeout = idle_timeout
        self._suggestion_limit = suggestion_limit
        self._now = now
        self._ids = MonotonicIdGenerator(last_id=max((a.id for a in appointments.load_all()), default=0))
        self._locks: dict[str, tuple[threading.Lock, int]] = {}
        self._lock_lock = threading.Lock()
        self._booking_lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    @contextmanager
    def _sender_lock(self, sender_id: str) -> Iterator[None]:
        """Serialize work per sender. A lock lives only while someone holds or awaits it."""
        with self._lock_lock:
            lock, users = self._locks.get(sender_id, (threading.Lock(), 0))
            self._locks[sender_id] = (lock, users + 1)
        try:
            with lock:
                yield
        finally:
            with self._lock_lock:
                lock, users = self._locks[sender_id]
                if users == 1:
                    del self._locks[sender_id]
                else:
                    self._locks[sender_id] = (lock, users - 1)

    def handle(self, message: Message) -> str | None:
        """Process one inbound message. Returns the reply text, or None if the message was dropped."""
        text = (message.text or "").strip()
        if not text:
            self._logger.info("Empty message dropped", extra={"message_id": message.id, "thread_id": message.sender_id})
            return None

        with self._sender_lock(message.sender_id):
            if self._conversations.has_processed(message.id):
                self._logger.info("Duplicate message ignored", extra={"message_id": message.id})
                return None
            self._conversations.mark_processed(message.id)

            now = self._now()
            state = self._load_state(message.sender_id, now)
            transition = self._advance(message.sender_id, state, text, now)

            if transition.state is None:
                self._conversations.delete_state(message.sender_id)
            else:
                self._conversations.set_state(message.sender_id, replace(transition.state, last_activity_at=now))

            self._logger.info(
                "Conversation step processed",
                extra={
                    "message_id": message.id,
                    "thread_id": message.sender_id,
                    "step": _step_name(state.step),
                    "next_step": _step_name(transition.state.step) if transition.state else "finished",
                },
            )

            self._send_reply.execute(recipient_id=message.sender_id, text=transition.reply)
            return transition.reply

    def _load_state(self, sender_id: str, now: datetime) -> ConversationState:
        state = self._conversations.get_state(sender_id)
        if state is not None and self._idle_timeout and now - state.last_activity_at > self._idle_timeout:
            self._logger.info(
                "Conversation expired",
                extra={"thread_id": sender_id, "step": _step_name(state.step), "reason": "idle_timeout"},
            )
            self._conversations.delete_state(sender_id)
            state = None
        if state is None:
            state = ConversationState(config=self._salon_config.get_config(), last_activity_at=now)
        return state

    def _checker(self, config: SalonConfig) -> AvailabilityChecker:
        return AvailabilityChecker(config, self._appointments.load_all(), now=self._now)

    def _advance(self, sender_id: str, state: ConversationState, text: str, now: datetime) -> Transition:
        step = state.step
        if step == ConversationStep.INITIAL:
            return self._on_initial(state, now)
        if step == ConversationStep.CONFIRM_BOOKING:
            return self._on_confirm_booking(state, text)
        if step == ConversationStep.SELECT_SERVICE:
            return self._on_select_service(state, text)
        if step == ConversationStep.SELECT_STAFF:
            return self._on_select_staff(state, text)
        if step == ConversationStep.SELECT_DATE_TIME:
            return self._on_select_date_time(state, text)
        if step == ConversationStep.CONFIRM_APPOINTMENT:
            return self._on_confirm_appointment(sender_id, state, text, now)
        return self._fallback(state)

    def _fallback(self, state: ConversationState) -> Transition:
        return Transition(
            reply_composer.fallback(state.config),
            replace(state, step=ConversationStep.CONFIRM_BOOKING, pending=PendingAppointment()),
        )

    def _on_initial(self, state: ConversationState, now: datetime) -> Transition:
        is_open = self._checker(state.config).is_open_now()
        return Transition(
            reply_composer.welcome(state.config, now, is_open),
            replace(state, step=ConversationStep.CONFIRM_BOOKING),
        )

    def _on_confirm_booking(self, state: ConversationState, text: str) -> Transition:
        if is_affirmative(text, self._tokens):
            return Transition(
                reply_composer.service_menu(state.config),
                replace(state, step=ConversationStep.SELECT_SERVICE),
            )
        return Transition(reply_composer.booking_declined(), None)

    def _on_select_service(self, state: ConversationState, text: str) -> Transition:
        services = state.config.services
        choice = extract_leading_int(text)
        if choice is None or not 1 <= choice <= len(services):
            return Transition(reply_composer.invalid_service(state.config), state)

        pending = replace(state.pending, service=services[choice - 1])
        return Transition(
            reply_composer.staff_menu(state.config, pending),
            replace(state, step=ConversationStep.SELECT_STAFF, pending=pending),
        )

    def _on_select_staff(self, state: ConversationState, text: str) -> Transition:
        staff = state.config.staff
        choice = extract_leading_int(text)
        if choice is not None and 1 <= choice <= len(staff):
            selected = staff[choice - 1]
        elif choice == len(staff) + 1 or (choice is None and is_any_staff(text, self._tokens)):
            selected = ANY_STAFF
        else:
            return Transition(reply_composer.invalid_staff(state.config), state)

        pending = replace(state.pending, staff=selected)
        return Transition(
            reply_composer.ask_date_time(pending),
            replace(state, step=ConversationStep.SELECT_DATE_TIME, pending=pending),
        )

    def _on_select_date_time(self, state: ConversationState, text: str) -> Transition:
        if state.pending.service is None or state.pending.staff is None:
            return self._fallback(state)

        parsed = parse_date_time(text)
        if parsed is None:
            return Transition(reply_composer.invalid_date_time(), state)

        validation = self._checker(state.config).validate_slot(
            state.pending.staff.name, parsed.date_formatted, parsed.time, self._suggestion_limit
        )
        if not validation.ok:
            self._logger.info(
                "Slot rejected",
                extra={"reason": validation.rejection.value, "date": parsed.date_formatted, "time": parsed.time},
            )
            return Transition(
                reply_composer.slot_rejected(state.config, validation.rejection, validation.suggestions),
                state,
            )

        pending = replace(
            state.pending,
            date_formatted=parsed.date_formatted,
            time=parsed.time,
            iso_date_time=parsed.moment,
        )
        return Transition(
            reply_composer.confirmation_summary(pending),
            replace(state, step=ConversationStep.CONFIRM_APPOINTMENT, pending=pending),
        )

    def _on_confirm_appointment(self, sender_id: str, state: ConversationState, text: str, now: datetime) -> Transition:
        pending = state.pending
        if any(v is None for v in (pending.service, pending.staff, pending.date_formatted, pending.time, pending.iso_date_time)):
            return self._fallback(state)

        if is_confirmation(text, self._tokens):
            # Re-check and append atomically across senders.
            with self._booking_lock:
                validation = self._checker(state.config).validate_slot(
                    pending.staff.name, pending.date_formatted, pending.time, self._suggestion_limit
                )
                if not validation.ok:
                    self._logger.info(
                        "Slot no longer available",
                        extra={"thread_id": sender_id, "reason": validation.rejection.value},
                    )
                    return Transition(
                        reply_composer.slot_rejected(state.config, validation.rejection, validation.suggestions),
                        replace(
                            state,
                            step=ConversationStep.SELECT_DATE_TIME,
                            pending=replace(pending, date_formatted=None, time=None, iso_date_time=None),
                        ),
                    )
                result = self._book(sender_id, pending, now)

            if not result.ok:
                return Transition(reply_composer.persistence_failed(), state)
            return Transition(reply_composer.appointment_confirmed(state.config, result.appointment), None)

        if is_rejection(text, self._tokens):
            return Transition(reply_composer.appointment_cancelled(), None)

        return Transition(reply_composer.invalid_confirmation(), state)

    def _book(self, sender_id: str, pending: PendingAppointment, now: datetime) -> BookingResult:
        appointment = Appointment(
            id=self._ids.next_id(),
            phone=sender_id,
            date_formatted=pending.date_formatted,
            time=pending.time,
            iso_date_time=pending.iso_date_time,
            service=pending.service,
            staff=pending.staff,
            created_at=now,
        )
        try:
            self._appointments.append(appointment)
        except PersistenceError as e:
            self._logger.error(
                "Appointment not persisted",
                extra={"thread_id": sender_id, "appointment_id": appointment.id, "reason": str(e)},
            )
            return BookingResult(ok=False, error=str(e))

        self._logger.info(
            "Appointment booked",
            extra={
                "thread_id": sender_id,
                "appointment_id": appointment.id,
                "service": appointment.service.name,
                "staff": appointment.staff.name,
                "date": appointment.date_formatted,
                "time": appointment.time,
            },
        )
        return BookingResult(ok=True, appointment=appointment)


def _step_name(step: ConversationStep | str) -> str:
    return step.value if isinstance(step, ConversationStep) else str(step)
