from __future__ import annotations

from datetime import datetime

from app.domain.entities.salon_config import SalonConfig

DAY_ABBREVIATIONS = ("Dom", "Lun", "Mar", "Mié", "Jue", "Vie", "Sáb")


def salutation(now: datetime) -> str:
    if now.hour < 12:
        return "¡Buenos días!"
    if now.hour < 20:
        return "¡Buenas tardes!"
    return "¡Buenas noches!"


def format_working_days(config: SalonConfig) -> str:
    return ", ".join(DAY_ABBREVIATIONS[day] for day in sorted(config.working_days))


def build_greeting(config: SalonConfig, now: datetime, is_open: bool) -> str:
    lines = [f"{salutation(now)} 😊 Soy Ana, la asistente de {config.name} 💇‍♀️"]
    if not is_open:
        lines.append(
            f"\n🌙 Ahora mismo estamos cerrados.\n"
            f"🕐 Horario: {config.open_time} - {config.close_time}\n"
            f"📅 {format_working_days(config)}\n"
            "Aun así puedes reservar tu cita por aquí."
        )
    return "\n".join(lines)
