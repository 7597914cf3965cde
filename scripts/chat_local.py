#!/usr/bin/env python3
"""
Interactive local chat harness (no HTTP, no WhatsApp).

Usage:
  python3 scripts/chat_local.py

What it does:
- Keeps a stable sender id for the session
- Sends your typed messages through the same HandleIncomingMessageUseCase
- Prints the reply, the resulting conversation step and the stored appointments
"""
from __future__ import annotations

import os
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.domain.entities.message import Message  # noqa: E402
from app.wiring.dependencies import get_container  # noqa: E402


def _print_header(sender_id: str) -> None:
    print("\nLocal Chat Harness")
    print("-" * 60)
    print(f"sender_id: {sender_id}")
    print("Type your message and press Enter.")
    print("Commands: /new (new sender), /state, /appointments, /quit, /help")
    print("-" * 60)


def main() -> None:
    sender_id = os.getenv("CHAT_SENDER_ID", "34600000001")
    container = get_container()
    use_case = container["use_case"]
    store = container["store"]
    appointments = container["appointments"]
    _print_header(sender_id)

    while True:
        try:
            user_text = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        if not user_text:
            continue

        cmd = user_text.lower()
        if cmd in ("/quit", "/exit"):
            print("Bye!")
            return
        if cmd == "/help":
            print("Commands:")
            print("  /new  -> start over as a different sender")
            print("  /state -> show the current conversation step")
            print("  /appointments -> list booked appointments")
            print("  /quit -> exit")
            continue
        if cmd == "/new":
            sender_id = f"local_{int(time.time())}"
            print(f"New sender_id: {sender_id}")
            continue
        if cmd == "/state":
            state = store.get_state(sender_id)
            print(f"step: {state.step.value if state else '(none)'}")
            continue
        if cmd == "/appointments":
            for appt in appointments.load_all():
                print(f"#{appt.id} {appt.date_formatted} {appt.time} {appt.service.name} / {appt.staff.name} ({appt.phone})")
            continue

        message = Message(
            id=f"local_{time.time_ns()}",
            thread_id=sender_id,
            sender_id=sender_id,
            text=user_text,
            timestamp=int(time.time()),
            platform="local",
        )
        reply = use_case.handle(message)

        print("\n--- Reply ---")
        print(reply.strip() if reply else "(no outbound message)")
        state = store.get_state(sender_id)
        print(f"[step: {state.step.value if state else 'finished'}]")
        print("-" * 60)


if __name__ == "__main__":
    main()
