"""Intent router: decide between the FAQ path and the practice path.

Precedence, highest first:

1. an explicit ``faq`` / ``practice`` mode sent by the client;
2. a tool-trigger phrase anywhere in the message → practice;
3. an FAQ pattern or keyword → faq;
4. otherwise practice.

Rule 2 is deliberately checked before rule 3, so "what's the price of
pronunciation lessons" goes to practice.
"""

from __future__ import annotations

import logging
import unicodedata
from typing import Literal

from linguachat.routing_rules import FAQ_KEYWORDS, FAQ_PATTERNS, TOOL_TRIGGER_PHRASES

logger = logging.getLogger(__name__)

Intent = Literal["faq", "practice"]

FAQ: Intent = "faq"
PRACTICE: Intent = "practice"


def normalize_mode(mode: str | None) -> Intent | None:
    """Return a recognised explicit mode, or ``None`` for auto-detection."""
    if not mode:
        return None
    mode = mode.strip().lower()
    if mode in (FAQ, PRACTICE):
        return mode
    return None


def _prepare(message: str) -> str:
    return unicodedata.normalize("NFC", message).lower()


def has_tool_trigger(message: str) -> bool:
    text = _prepare(message)
    return any(phrase in text for phrase in TOOL_TRIGGER_PHRASES)


def is_faq_query(message: str) -> bool:
    """Heuristic FAQ detection without any explicit override."""
    if has_tool_trigger(message):
        return False
    text = _prepare(message)
    if any(pattern.search(text) for pattern in FAQ_PATTERNS):
        return True
    return any(keyword in text for keyword in FAQ_KEYWORDS)


def classify_intent(message: str, explicit_mode: str | None = None) -> Intent:
    """Route *message* to ``"faq"`` or ``"practice"``."""
    override = normalize_mode(explicit_mode)
    if override is not None:
        logger.info("Using explicit %s mode", override)
        return override

    intent: Intent = FAQ if is_faq_query(message) else PRACTICE
    logger.info("Auto-detected mode for query %r -> %s", message[:80], intent)
    return intent
