"""LangChain tools for the English practice path.

Each tool is a pure, synchronous function over the static tables in
:mod:`linguachat.tools.lexicon` and returns a ``{"content", "type"}`` dict.
The model sees the tool catalog via ``bind_tools(PRACTICE_TOOLS)``; the
pipeline runs a requested tool through :func:`execute_tool`, which never
raises for a bad tool name or bad arguments and returns an ``error`` payload
instead.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Literal

from langchain_core.tools import BaseTool, tool
from pydantic import BaseModel, Field, ValidationError

from linguachat.errors import UnknownToolError
from linguachat.tools.lexicon import (
    DEFAULT_QUIZ_LEVEL,
    PHONETICS,
    PLACEHOLDER_PHONETIC,
    QUIZ_BANK,
    WORD_DEFINITIONS,
)

logger = logging.getLogger(__name__)

Level = Literal["beginner", "intermediate", "advanced"]

ToolResult = dict[str, str]


# ── Executors ────────────────────────────────────────────────────────


def word_definition(word: str, include_examples: bool = False) -> ToolResult:
    """Definition and synonyms for *word*, with examples on request."""
    entry = WORD_DEFINITIONS.get(word.lower())
    if entry is None:
        definition = f'The word "{word}" means... (definition would be provided by a dictionary API)'
        synonyms: tuple[str, ...] = ("synonym1", "synonym2")
        examples: tuple[str, ...] = (f'Example sentence with "{word}".',)
    else:
        definition = entry["definition"]
        synonyms = entry["synonyms"]
        examples = entry["examples"]

    content = (
        f"**Từ**: {word}\n\n"
        f"**Định nghĩa**: {definition}\n\n"
        f"**Từ đồng nghĩa**: {', '.join(synonyms)}"
    )
    if include_examples:
        content += "\n\n**Ví dụ**:\n" + "\n".join(f"• {ex}" for ex in examples)
    return {"content": content, "type": "word_definition"}


def pronunciation_help(word: str, include_phonetics: bool = False) -> ToolResult:
    """IPA transcription for known words, a generic guide otherwise."""
    phonetic = PHONETICS.get(word.lower().strip())
    if phonetic is not None:
        content = (
            f'Từ "{word}" được phát âm như sau:\n\n'
            f"🔊 **Phiên âm IPA**: {phonetic}\n\n"
            "📝 **Cách phát âm**: \n"
            "- Chia thành các âm tiết\n"
            "- Luyện tập từ từ\n"
            "- Lặp lại nhiều lần\n\n"
            "💡 **Mẹo**: Hãy nghe và lặp lại để cải thiện phát âm!"
        )
    else:
        tag = f" {PLACEHOLDER_PHONETIC}" if include_phonetics else ""
        content = (
            f'Từ "{word}" có thể được phát âm như sau:\n\n'
            f"🔊 **Phiên âm**: {word.upper()}{tag}\n\n"
            "📝 **Hướng dẫn**:\n"
            "- Chia từ thành các âm tiết\n"
            "- Chú ý trọng âm\n"
            "- Luyện tập thường xuyên\n\n"
            "💡 Bạn có thể tra từ điển hoặc nghe audio để có phát âm chính xác nhất!"
        )
    return {"content": content, "type": "pronunciation_help"}


def grammar_explanation(topic: str, level: str = "intermediate") -> ToolResult:
    content = (
        f"{topic.upper()} ({level} level):\n\n"
        "This is a fundamental grammar concept that helps structure English "
        "sentences properly. Here are the key points:\n\n"
        "1. Definition and usage\n"
        "2. Common patterns and examples\n"
        "3. Practice exercises\n\n"
        "Would you like me to provide specific examples?"
    )
    return {"content": content, "type": "grammar_explanation"}


def translate_text(text: str, target_lang: str, source_lang: str | None = None) -> ToolResult:
    # Placeholder: no translation backend is wired in.
    content = (
        f"Translation from {source_lang or 'auto-detected'} to {target_lang}:\n\n"
        f'"{text}" \n\n→ [Translated text would appear here]'
    )
    return {"content": content, "type": "translation"}


def vocabulary_quiz(
    level: str = DEFAULT_QUIZ_LEVEL,
    topic: str | None = None,
    question_count: int | None = 3,
) -> ToolResult:
    """The first *question_count* questions of the bank for *level*.

    A count of 0 or ``None`` means the default of 3; larger counts return
    the whole bank.
    """
    question_count = question_count or 3
    questions = QUIZ_BANK.get(level, QUIZ_BANK[DEFAULT_QUIZ_LEVEL])[:question_count]
    header = f"**Vocabulary Quiz - {level.upper()} Level**\n"
    if topic:
        header += f"**Chủ đề**: {topic}\n"
    body = "\n\n".join(f"{i}. {q}" for i, q in enumerate(questions, start=1))
    content = (
        f"{header}\n{body}\n\n"
        "💡 Hãy trả lời từng câu hỏi và tôi sẽ kiểm tra kết quả cho bạn!"
    )
    return {"content": content, "type": "vocabulary_quiz"}


# ── Argument schemas ─────────────────────────────────────────────────


class WordDefinitionArgs(BaseModel):
    word: str = Field(..., min_length=1, description="The English word to get definition for")
    include_examples: bool = Field(False, description="Whether to include example sentences")


class PronunciationArgs(BaseModel):
    word: str = Field(..., min_length=1, description="The English word to get pronunciation help for")
    include_phonetics: bool = Field(False, description="Whether to include IPA phonetic transcription")


class GrammarArgs(BaseModel):
    topic: str = Field(
        ..., min_length=1,
        description="The grammar topic to explain (e.g. 'present perfect', 'conditionals', 'passive voice')",
    )
    level: Level = Field("intermediate", description="The difficulty level for the explanation")


class TranslateArgs(BaseModel):
    text: str = Field(..., min_length=1, description="The text to translate")
    source_lang: str | None = Field(None, description="Source language code (e.g. 'en', 'vi', 'fr')")
    target_lang: str = Field(..., min_length=1, description="Target language code (e.g. 'en', 'vi', 'fr')")


class VocabularyQuizArgs(BaseModel):
    level: str = Field(
        DEFAULT_QUIZ_LEVEL,
        description="The difficulty level for the quiz: beginner, intermediate or advanced",
    )
    topic: str | None = Field(None, description="Topic for vocabulary (e.g. 'daily life', 'business', 'travel')")
    question_count: int | None = Field(
        3, ge=0, description="Number of quiz questions to generate (0 or null means 3)",
    )


# ── Tools exposed to the model ───────────────────────────────────────


@tool("get_word_definition", args_schema=WordDefinitionArgs)
def get_word_definition(word: str, include_examples: bool = False) -> ToolResult:
    """Get definition, synonyms, and example sentences for English words."""
    return word_definition(word, include_examples)


@tool("get_pronunciation_help", args_schema=PronunciationArgs)
def get_pronunciation_help(word: str, include_phonetics: bool = False) -> ToolResult:
    """Get pronunciation help for English words."""
    return pronunciation_help(word, include_phonetics)


@tool("get_grammar_explanation", args_schema=GrammarArgs)
def get_grammar_explanation(topic: str, level: str = "intermediate") -> ToolResult:
    """Get detailed grammar explanation for English language rules."""
    return grammar_explanation(topic, level)


@tool("translate_text", args_schema=TranslateArgs)
def translate(text: str, target_lang: str, source_lang: str | None = None) -> ToolResult:
    """Translate text from one language to another."""
    return translate_text(text, target_lang, source_lang)


@tool("get_vocabulary_quiz", args_schema=VocabularyQuizArgs)
def get_vocabulary_quiz(
    level: str = DEFAULT_QUIZ_LEVEL,
    topic: str | None = None,
    question_count: int | None = 3,
) -> ToolResult:
    """Generate vocabulary quiz questions for English learning."""
    return vocabulary_quiz(level, topic, question_count)


PRACTICE_TOOLS: tuple[BaseTool, ...] = (
    get_word_definition,
    get_pronunciation_help,
    get_grammar_explanation,
    translate,
    get_vocabulary_quiz,
)

TOOLS_BY_NAME: Mapping[str, BaseTool] = MappingProxyType({t.name: t for t in PRACTICE_TOOLS})


def get_tool(name: str) -> BaseTool:
    try:
        return TOOLS_BY_NAME[name]
    except KeyError:
        raise UnknownToolError(name) from None


def execute_tool(name: str, args: Mapping[str, Any]) -> ToolResult:
    """Run the tool *name* with *args*.

    Unknown names and arguments that fail the tool's schema produce an
    ``{"type": "error"}`` payload so the model can still answer.
    """
    logger.info("Executing tool %s with %s", name, dict(args))
    try:
        selected = get_tool(name)
    except UnknownToolError as exc:
        logger.warning("%s", exc)
        return {"content": f"Unknown function: {name}", "type": "error"}

    try:
        return selected.invoke(dict(args))
    except ValidationError as exc:
        logger.warning("Invalid arguments for %s: %s", name, exc)
        return {"content": f"Invalid arguments for {name}: {exc.error_count()} error(s)", "type": "error"}
