"""Parsing of the structured block the intake assistant appends to its replies."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

_EXTRACTED_BLOCK_RE = re.compile(r"\[EXTRACTED_DATA\](.*?)\[/EXTRACTED_DATA\]", re.DOTALL)

INTAKE_SYSTEM_PROMPT = """Ты помощник по академическим работам. Твоя задача:
1. Выяснить тип работы (реферат, курсовая, дипломная, диссертация, домашнее задание)
2. Уточнить тему
3. Собрать требования
4. Определить объем

Когда у тебя достаточно информации, добавь в конец ответа JSON в формате:
[EXTRACTED_DATA]
{
  "workType": "essay|coursework|diploma|thesis|homework",
  "topic": "тема работы",
  "requirements": "дополнительные требования",
  "pages": "количество страниц"
}
[/EXTRACTED_DATA]

Будь дружелюбным и помогай сформулировать требования правильно."""


class WorkRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    work_type: Literal["essay", "coursework", "diploma", "thesis", "homework"] = Field(
        ..., alias="workType"
    )
    topic: str = Field(..., min_length=1)
    requirements: str = ""
    pages: str = ""


class ExtractionKind(str, Enum):
    NONE = "none"
    PARSED = "parsed"
    MALFORMED = "malformed"


@dataclass(slots=True)
class ParsedReply:
    """Assistant reply split into visible text and its extracted-data block."""

    kind: ExtractionKind
    content: str
    work_request: Optional[WorkRequest] = None
    error: Optional[str] = None


def parse_assistant_reply(reply: str) -> ParsedReply:
    """Separate the ``[EXTRACTED_DATA]`` block from the text shown to the user.

    A block that is not valid JSON or does not describe a work request yields
    ``MALFORMED`` with the parse error; the visible text keeps the raw block so
    nothing is lost.
    """
    match = _EXTRACTED_BLOCK_RE.search(reply)
    if not match:
        return ParsedReply(kind=ExtractionKind.NONE, content=reply)

    try:
        work_request = WorkRequest.model_validate(json.loads(match.group(1).strip()))
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.warning("Assistant returned a malformed extracted-data block: %s", exc)
        return ParsedReply(kind=ExtractionKind.MALFORMED, content=reply, error=str(exc))

    visible = _EXTRACTED_BLOCK_RE.sub("", reply, count=1).strip()
    return ParsedReply(kind=ExtractionKind.PARSED, content=visible, work_request=work_request)
