"""Formatting helpers for the chat page."""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from typing import Literal

BlockKind = Literal["heading", "paragraph", "list"]

_EMOJI_RE = re.compile("[\U0001F000-\U0001FAFF\u2600-\u27BF\u2B00-\u2BFF\uFE0F\u200D]")
_EMPHASIS_RE = re.compile(r"(\*\*|__)(.+?)\1")
_SINGLE_STAR_RE = re.compile(r"(?<![\w*])\*(?!\s)(.+?)(?<!\s)\*(?![\w*])")
_INLINE_CODE_RE = re.compile(r"`([^`]*)`")
_HEADING_MARK_RE = re.compile(r"^#{1,6}\s+")
_TITLE_LINE_RE = re.compile(r"^[A-Z][^:.!?]*:$")
_BULLET_RE = re.compile(r"^\s*(?:[*\-•]|\d+[.)])\s+")
_PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")
_SPACES_RE = re.compile(r"[ \t]{2,}")


@dataclass(frozen=True)
class AnswerBlock:
    """One display block of an assistant answer."""

    kind: BlockKind
    text: str = ""
    items: tuple[str, ...] = field(default_factory=tuple)


def escape_text(text: str | None) -> str:
    """HTML-escape user-supplied text; ``None`` becomes an empty string."""
    if not text:
        return ""
    return html.escape(str(text), quote=True).strip()


def strip_markdown(text: str) -> str:
    """Drop emoji and inline markdown markers, keeping the words."""
    text = _EMOJI_RE.sub("", text)
    text = _HEADING_MARK_RE.sub("", text.strip())
    text = _EMPHASIS_RE.sub(r"\2", text)
    text = _SINGLE_STAR_RE.sub(r"\1", text)
    text = _INLINE_CODE_RE.sub(r"\1", text)
    return _SPACES_RE.sub(" ", text).strip()


def _is_heading(line: str) -> bool:
    stripped = line.strip()
    if _HEADING_MARK_RE.match(stripped):
        return True
    return bool(_TITLE_LINE_RE.match(strip_markdown(stripped)))


def split_answer_blocks(text: str | None) -> list[AnswerBlock]:
    """Split an LLM answer into heading, paragraph and list blocks.

    Paragraphs are separated by blank lines. A paragraph's first line is a
    heading when it is a markdown heading or a short ``Title:`` line; lines
    that all start with a bullet or number become one list block.
    """
    if not text:
        return []

    blocks: list[AnswerBlock] = []
    for paragraph in _PARAGRAPH_SPLIT_RE.split(text.replace("\r\n", "\n")):
        lines = [line for line in paragraph.split("\n") if line.strip()]
        if not lines:
            continue

        if _is_heading(lines[0]):
            heading = strip_markdown(lines[0])
            if heading:
                blocks.append(AnswerBlock(kind="heading", text=heading))
            lines = lines[1:]
            if not lines:
                continue

        if all(_BULLET_RE.match(line) for line in lines):
            items = tuple(
                item for item in (strip_markdown(_BULLET_RE.sub("", line, count=1)) for line in lines)
                if item
            )
            if items:
                blocks.append(AnswerBlock(kind="list", items=items))
            continue

        body = " ".join(strip_markdown(line) for line in lines).strip()
        if body:
            blocks.append(AnswerBlock(kind="paragraph", text=body))
    return blocks


def blocks_to_markdown(blocks: list[AnswerBlock]) -> str:
    """Render blocks as plain Streamlit markdown."""
    parts: list[str] = []
    for block in blocks:
        if block.kind == "heading":
            parts.append(f"**{block.text}**")
        elif block.kind == "list":
            parts.append("\n".join(f"- {item}" for item in block.items))
        else:
            parts.append(block.text)
    return "\n\n".join(parts)
