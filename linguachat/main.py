"""CLI entry point for LinguaChat.

A terminal chat loop for development and manual testing.  For production,
use the FastAPI server (linguachat/server.py).

Usage:
    python -m linguachat.main                 # normal mode (quiet)
    python -m linguachat.main --debug         # debug mode (shows API calls)
    python -m linguachat.main --bot support   # talk to a persona assistant

Commands inside the loop: ``/faq`` and ``/practice`` force a path of the
rag bot, ``/auto`` restores auto-detection, ``new`` clears the history.
"""

from __future__ import annotations

import argparse
import logging

from dotenv import load_dotenv

from linguachat.agent import create_pipeline
from linguachat.assistants import create_assistants
from linguachat.config import HISTORY_WINDOW, MAX_MESSAGE_LENGTH
from linguachat.models import ConversationTurn

logger = logging.getLogger(__name__)

_MODE_COMMANDS = {"/faq": "faq", "/practice": "practice", "/auto": None}


def _configure_logging(debug: bool = False) -> None:
    """WARNING by default, DEBUG when --debug is passed."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    )
    if not debug:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("linguachat").setLevel(logging.DEBUG if debug else logging.INFO)


def main():
    """Run the interactive CLI chat loop."""
    parser = argparse.ArgumentParser(description="LinguaChat CLI")
    parser.add_argument("--debug", action="store_true", help="Show all log messages")
    parser.add_argument(
        "--bot", choices=["rag", "support", "learning"], default="rag",
        help="Which bot to talk to (default: rag)",
    )
    args = parser.parse_args()

    load_dotenv()
    _configure_logging(debug=args.debug)

    print("\n" + "=" * 60)
    print(f"  LinguaChat - CLI Chat ({args.bot} bot)")
    print("=" * 60)
    print("  Type your message and press Enter.")
    print("  Commands: 'quit' to exit, 'new' to clear history,")
    print("            /faq, /practice, /auto to pick the rag path.")
    print("=" * 60 + "\n")

    pipeline = create_pipeline()
    assistant = create_assistants(pipeline.llm).get(args.bot)
    history: list[ConversationTurn] = []
    mode: str | None = None

    while True:
        try:
            user_input = input("You: ").strip()
        except (KeyboardInterrupt, EOFError):
            print("\n\nGoodbye!")
            break

        if not user_input:
            continue
        if user_input.lower() in ("exit", "quit", "q"):
            print("\nGoodbye! Keep practising!")
            break
        if user_input.lower() == "new":
            history.clear()
            print("\n>> History cleared.\n")
            continue
        if user_input.lower() in _MODE_COMMANDS:
            mode = _MODE_COMMANDS[user_input.lower()]
            print(f"\n>> Mode: {mode or 'auto-detect'}\n")
            continue
        if len(user_input) > MAX_MESSAGE_LENGTH:
            print(f"\n>> Message too long (max {MAX_MESSAGE_LENGTH} characters).\n")
            continue

        if assistant is None:
            result = pipeline.process_query(user_input, history, mode)
        else:
            result = assistant.process_query(user_input, history)

        if not result.success:
            print(f"\n[{result.mode}] Sorry, something went wrong. Please try again.\n")
            continue

        print(f"\n[{result.mode}] {result.response}")
        for source in result.sources:
            print(f"   ↳ {source.model_dump(exclude_none=True)}")
        print()

        history.append(ConversationTurn(sender="user", text=user_input))
        history.append(ConversationTurn(sender="bot", text=result.response or ""))
        del history[:-HISTORY_WINDOW]


if __name__ == "__main__":
    main()
