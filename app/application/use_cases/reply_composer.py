from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from app.application.use_cases.availability import SlotRejection
from app.application.utils.greeting import build_greeting, format_working_days
from app.domain.entities.appointment import Appointment
from app.domain.entities.conversation_state import PendingAppointment
from app.domain.entities.salon_config import ANY_STAFF_NAME, SalonConfig

YES_NO_PROMPT = "¿Quieres reservar una cita? (Sí/No)"
DATE_TIME_EXAMPLE = "Escribe: DD/MM/YYYY HH:MM\nEjemplo: 25/12/2026 15:30"


def format_price(price: Decimal) -> str:
    if price == price.to_integral_value():
        return f"{price.quantize(Decimal(1))}€"
    return f"{price.quantize(Decimal('0.01'))}€"


def welcome(config: SalonConfig, now: datetime, is_open: bool) -> str:
    return f"{build_greeting(config, now, is_open)}\n\n{YES_NO_PROMPT}"


def service_menu(config: SalonConfig) -> str:
    lines = [
        f"{i}. {s.name} - {format_price(s.price)} ({s.duration_minutes} min)"
        for i, s in enumerate(config.services, 1)
    ]
    return "¡Genial! ✨ ¿Qué servicio te gustaría reservar?\n\n" + "\n".join(lines) + "\n\nResponde con el número."


def booking_declined() -> str:
    return "😊 ¡Sin problema! Si cambias de idea, escríbenos cuando quieras."


def invalid_service(config: SalonConfig) -> str:
    return f"Por favor, elige un número del 1 al {len(config.services)} 😊"


def staff_menu(config: SalonConfig, pending: PendingAppointment) -> str:
    lines = [
        f"{i}. {m.name} - {m.specialty}" if m.specialty else f"{i}. {m.name}"
        for i, m in enumerate(config.staff, 1)
    ]
    lines.append(f"{len(config.staff) + 1}. {ANY_STAFF_NAME} (sin preferencia)")
    service_name = pending.service.name if pending.service else ""
    return (
        f"¡Perfecto! Has elegido {service_name} ✨\n\n"
        "¿Con quién prefieres tu cita?\n\n" + "\n".join(lines)
    )


def invalid_staff(config: SalonConfig) -> str:
    return f"Por favor, elige un número del 1 al {len(config.staff) + 1} 😊"


def ask_date_time(pending: PendingAppointment) -> str:
    if pending.staff and not pending.staff.is_any:
        intro = f"¡Genial! Con {pending.staff.name} 👏"
    else:
        intro = "¡Genial! Te asignaremos a quien esté disponible 👏"
    return f"{intro}\n\n¿Para qué día y hora?\n{DATE_TIME_EXAMPLE}"


def invalid_date_time() -> str:
    return f"No he entendido la fecha 🤔\n{DATE_TIME_EXAMPLE}"


def slot_rejected(config: SalonConfig, rejection: SlotRejection, suggestions: list[str]) -> str:
    if rejection == SlotRejection.PAST:
        return "⏰ Esa fecha y hora ya han pasado. Por favor, elige una fecha futura."
    if rejection == SlotRejection.NON_WORKING_DAY:
        return f"📅 Ese día no abrimos. Trabajamos: {format_working_days(config)}.\nElige otro día, por favor."
    if rejection == SlotRejection.OUTSIDE_HOURS:
        return (
            f"🕐 Esa hora está fuera de nuestro horario ({config.open_time} - {config.close_time}).\n"
            "Elige otra hora, por favor."
        )
    if suggestions:
        return (
            "😕 Esa hora ya está reservada.\n\nHoras disponibles ese día:\n"
            + "\n".join(f"• {slot}" for slot in suggestions)
            + "\n\nEscribe la fecha con la hora que prefieras."
        )
    return "😕 Esa hora ya está reservada y no quedan huecos libres ese día. Prueba con otra fecha."


def confirmation_summary(pending: PendingAppointment) -> str:
    service = pending.service
    staff = pending.staff
    return (
        "🎯 Resumen de tu cita:\n\n"
        f"📅 {pending.date_formatted} a las {pending.time}\n"
        f"✂️ {service.name if service else ''}\n"
        f"👤 {staff.name if staff else ANY_STAFF_NAME}\n"
        f"💰 {format_price(service.price) if service else ''}\n\n"
        "Responde CONFIRMA para reservar o RECHAZA para cancelar."
    )


def invalid_confirmation() -> str:
    return "Por favor, responde CONFIRMA para reservar o RECHAZA para cancelar 😊"


def appointment_confirmed(config: SalonConfig, appointment: Appointment) -> str:
    return (
        "🎉 ¡CITA CONFIRMADA!\n\n"
        f"Te esperamos el {appointment.date_formatted} a las {appointment.time} 😊\n\n"
        f"¡Gracias por confiar en {config.name}! 💕"
    )


def appointment_cancelled() -> str:
    return '😊 No hay problema, no hemos reservado nada.\n\nEscribe "hola" para empezar de nuevo.'


def persistence_failed() -> str:
    return (
        "😔 Lo sentimos, no hemos podido guardar tu cita por un problema técnico.\n"
        "Responde CONFIRMA para intentarlo de nuevo."
    )


def fallback(config: SalonConfig) -> str:
    return f"Solo puedo ayudarte con reservas en {config.name} 😊\n\n{YES_NO_PROMPT}"
