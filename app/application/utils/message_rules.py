from __future__ import annotations

import re
from dataclasses import dataclass

LEADING_INT = re.compile(r"^\s*(\d+)")


@dataclass(frozen=True)
class IntentTokens:
    affirmative: tuple[str, ...] = ("si", "sí", "yes")
    confirm: tuple[str, ...] = ("confirma", "confirm")
    reject: tuple[str, ...] = ("rechaza", "cancelar", "cancel", "no")
    any_staff: tuple[str, ...] = ("indiferente", "cualquier")

    @staticmethod
    def from_lists(
        affirmative: list[str] | None = None,
        confirm: list[str] | None = None,
        reject: list[str] | None = None,
        any_staff: list[str] | None = None,
    ) -> "IntentTokens":
        defaults = IntentTokens()
        return IntentTokens(
            affirmative=_clean(affirmative) or defaults.affirmative,
            confirm=_clean(confirm) or defaults.confirm,
            reject=_clean(reject) or defaults.reject,
            any_staff=_clean(any_staff) or defaults.any_staff,
        )


def _clean(tokens: list[str] | None) -> tuple[str, ...]:
    return tuple(t.strip().lower() for t in (tokens or []) if t and t.strip())


def normalize_text(text: str) -> str:
    return " ".join(text.lower().split())


def contains_any(text: str, tokens: tuple[str, ...]) -> bool:
    normalized = normalize_text(text)
    return any(token in normalized for token in tokens)


def is_affirmative(text: str, tokens: IntentTokens) -> bool:
    return contains_any(text, tokens.affirmative)


def is_confirmation(text: str, tokens: IntentTokens) -> bool:
    return contains_any(text, tokens.confirm)


def is_rejection(text: str, tokens: IntentTokens) -> bool:
    return contains_any(text, tokens.reject)


def is_any_staff(text: str, tokens: IntentTokens) -> bool:
    return contains_any(text, tokens.any_staff)


def extract_leading_int(text: str) -> int | None:
    match = LEADING_INT.match(text)
    if not match:
        return None
    return int(match.group(1))
