"""Knowledge corpus builder.

Turns the structured reference document (subscription plans, learning
roadmap, troubleshooting entries, support contact) into a flat list of
uniformly shaped :class:`Chunk` objects ready to be embedded.

Each category has one fixed rendering template.  Categories that are absent
from the document are skipped.  Output order is categories in document
order, then entries in document order, so two builds from the same document
are identical.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

logger = logging.getLogger(__name__)

ChunkCategory = Literal["plan", "roadmap", "troubleshooting", "support"]


@dataclass(frozen=True)
class Chunk:
    """A retrievable unit of reference text."""

    text: str
    category: ChunkCategory
    id: str
    display_label: str


def load_reference_document(path: str | Path) -> dict[str, Any]:
    """Read the reference JSON document from *path*."""
    path = Path(path)
    with path.open(encoding="utf-8") as fh:
        document = json.load(fh)
    logger.info("Knowledge base loaded from %s", path)
    return document


# ── Per-category renderers ───────────────────────────────────────────


def _join(items) -> str:
    return ", ".join(str(item) for item in items)


def _plan_chunks(plans: list[dict[str, Any]]) -> Iterator[Chunk]:
    for index, plan in enumerate(plans):
        text = (
            f"Subscription Plan: {plan['title']}\n"
            f"Price: {plan['price']}\n"
            f"Description: {plan['description']}\n"
            f"Features: {_join(plan['features'])}"
        )
        yield Chunk(text=text, category="plan", id=f"plan_{index}", display_label=plan["title"])


def _roadmap_chunks(roadmap: Mapping[str, dict[str, Any]]) -> Iterator[Chunk]:
    for index, data in enumerate(roadmap.values()):
        text = (
            f"Learning Level: {data['level']}\n"
            f"Duration: {data['duration']}\n"
            f"Goals: {_join(data['goals'])}\n"
            f"Topics: {_join(data['topics'])}\n"
            f"Recommended Study Time: {data['recommended_study_time']}"
        )
        yield Chunk(text=text, category="roadmap", id=f"roadmap_{index}", display_label=data["level"])


def _troubleshooting_chunks(entries: list[dict[str, Any]]) -> Iterator[Chunk]:
    for index, entry in enumerate(entries):
        text = (
            f"Technical Issue: {entry['issue']}\n"
            f"Causes: {_join(entry['causes'])}\n"
            f"Solutions: {_join(entry['solutions'])}"
        )
        yield Chunk(
            text=text,
            category="troubleshooting",
            id=f"troubleshoot_{index}",
            display_label=entry["issue"],
        )


def _support_chunks(support: dict[str, Any]) -> Iterator[Chunk]:
    text = (
        "Support Contact Information\n"
        f"Email: {support['email']}\n"
        f"Phone: {support['phone']}\n"
        f"Hours: {support['hours']}\n"
        f"Live Chat: {support['live_chat']}\n"
        f"Email Response Time: {support['response_time']['email']}\n"
        f"Phone Response Time: {support['response_time']['phone']}\n"
        f"Supported Languages: {_join(support['languages_supported'])}"
    )
    yield Chunk(text=text, category="support", id="support_contact", display_label="Contact Support")


# Document key → renderer.  Keys not listed here are ignored.
_RENDERERS: dict[str, Callable[[Any], Iterator[Chunk]]] = {
    "subscription_plans": _plan_chunks,
    "learning_roadmap": _roadmap_chunks,
    "troubleshooting": _troubleshooting_chunks,
    "contact_support": _support_chunks,
}


def build_chunks(document: Mapping[str, Any]) -> list[Chunk]:
    """Render every known category of *document* into chunks.

    Iterates the document's own keys so categories come out in document
    order; dicts preserve the insertion order of the parsed JSON.
    """
    chunks: list[Chunk] = []
    for key, section in document.items():
        renderer = _RENDERERS.get(key)
        if renderer is None or not section:
            continue
        chunks.extend(renderer(section))

    logger.info("Built %d chunks from the knowledge base", len(chunks))
    return chunks
