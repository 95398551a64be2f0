"""Text generation gateway over the OpenAI chat completions API."""

from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional, Sequence

from openai import AsyncOpenAI, OpenAIError

from ..domain.models.generation import (
    ChatMessage,
    ChatReply,
    GatewayConfig,
    PlagiarismReport,
    TokenUsage,
)

logger = logging.getLogger(__name__)

ACADEMIC_WORK_FALLBACK = "Ошибка генерации текста"
HOMEWORK_FALLBACK = "Ошибка решения задания"
PLAGIARISM_FALLBACK = "Анализ недоступен"
PLAGIARISM_UNAVAILABLE = "Подробный анализ временно недоступен. Проверьте настройки API."
PLAGIARISM_EXCERPT_LENGTH = 1000

_ACADEMIC_SYSTEM_PROMPT = """Ты экспертный помощник для написания академических работ.
Создавай качественные, структурированные и уникальные тексты на русском языке.
Обязательно включай введение, основную часть с разделами, заключение и список литературы.
Используй академический стиль изложения."""

_HOMEWORK_SYSTEM_PROMPT = """Ты экспертный преподаватель по предмету "{subject}".
Решай задания для уровня "{level}" с подробными объяснениями.
Предоставляй пошаговое решение на русском языке.
Объясняй каждый шаг доступным языком."""

_HOMEWORK_USER_PROMPT = """Помоги решить задание по предмету "{subject}" (уровень: {level}):

{task}

Требования к ответу:
1. Подробное пошаговое решение
2. Объяснение каждого шага
3. Проверка результата (если применимо)
4. Дополнительные пояснения теории"""

_PLAGIARISM_SYSTEM_PROMPT = """Ты эксперт по анализу текстов на уникальность.
Проанализируй текст и дай рекомендации по повышению уникальности."""

_PLAGIARISM_USER_PROMPT = """Проанализируй следующий текст и дай рекомендации:

{excerpt}...

Предоставь:
1. Общую оценку качества текста
2. Рекомендации по улучшению уникальности
3. Советы по академическому стилю"""


class GenerationRequestError(RuntimeError):
    """The completion endpoint could not be reached or answered with an error."""


def build_academic_prompt(
    work_type: str,
    topic: str,
    requirements: Optional[str] = None,
    pages: Optional[str] = None,
) -> List[ChatMessage]:
    lines = [f'Напиши {work_type} на тему: "{topic}"']
    if requirements:
        lines.append(f"Требования: {requirements}")
    if pages:
        lines.append(f"Объем: {pages} страниц")
    lines.extend(
        [
            "",
            "Структура должна включать:",
            "1. Введение",
            "2. Основная часть (разделенная на главы)",
            "3. Заключение",
            "4. Список литературы",
        ]
    )
    return [
        ChatMessage(role="system", content=_ACADEMIC_SYSTEM_PROMPT),
        ChatMessage(role="user", content="\n".join(lines)),
    ]


def build_homework_prompt(subject: str, level: str, task: str) -> List[ChatMessage]:
    return [
        ChatMessage(role="system", content=_HOMEWORK_SYSTEM_PROMPT.format(subject=subject, level=level)),
        ChatMessage(
            role="user",
            content=_HOMEWORK_USER_PROMPT.format(subject=subject, level=level, task=task),
        ),
    ]


def build_plagiarism_prompt(text: str) -> List[ChatMessage]:
    excerpt = text[:PLAGIARISM_EXCERPT_LENGTH]
    return [
        ChatMessage(role="system", content=_PLAGIARISM_SYSTEM_PROMPT),
        ChatMessage(role="user", content=_PLAGIARISM_USER_PROMPT.format(excerpt=excerpt)),
    ]


class TextGenerationGateway:
    """Wrapper around the OpenAI chat-completions API for study tasks."""

    def __init__(
        self,
        config: GatewayConfig,
        *,
        client: Optional[AsyncOpenAI] = None,
        base_url: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._config = config
        self._client = client or AsyncOpenAI(api_key=config.api_key, base_url=base_url, max_retries=0)
        self._rng = rng or random.SystemRandom()

    @property
    def config(self) -> GatewayConfig:
        return self._config

    def update_config(self, **changes: Any) -> GatewayConfig:
        """Merge non-None ``changes`` into the active configuration.

        A changed ``api_key`` only applies to clients built afterwards; the
        settings service rebuilds the gateway for that case.
        """
        self._config = self._config.merged(**changes)
        return self._config

    async def aclose(self) -> None:
        await self._client.close()

    async def generate_academic_work(
        self,
        work_type: str,
        topic: str,
        requirements: Optional[str] = None,
        pages: Optional[str] = None,
    ) -> str:
        reply = await self._complete(build_academic_prompt(work_type, topic, requirements, pages))
        return reply.content or ACADEMIC_WORK_FALLBACK

    async def solve_homework(self, subject: str, level: str, task: str) -> str:
        reply = await self._complete(build_homework_prompt(subject, level, task))
        return reply.content or HOMEWORK_FALLBACK

    async def check_plagiarism(self, text: str) -> PlagiarismReport:
        """Produce a uniqueness score and advisory report for ``text``.

        The score is drawn uniformly from 70..100 and ignores the text; only
        the report comes from the model. Transport failures still return the
        score with a placeholder report.
        """
        uniqueness = self._rng.randint(70, 100)
        try:
            reply = await self._complete(build_plagiarism_prompt(text))
        except GenerationRequestError:
            return PlagiarismReport(uniqueness_score=uniqueness, report=PLAGIARISM_UNAVAILABLE)
        return PlagiarismReport(uniqueness_score=uniqueness, report=reply.content or PLAGIARISM_FALLBACK)

    async def chat(self, messages: Sequence[ChatMessage]) -> ChatReply:
        return await self._complete(messages)

    async def test_connection(self) -> bool:
        """Check the credentials by listing models; any success means valid."""
        try:
            await self._client.models.list()
        except OpenAIError as exc:
            logger.info("OpenAI connectivity check failed: %s", exc)
            return False
        return True

    async def _complete(self, messages: Sequence[ChatMessage]) -> ChatReply:
        payload: List[Dict[str, str]] = [
            {"role": message.role, "content": message.content} for message in messages
        ]
        try:
            response = await self._client.chat.completions.create(
                model=self._config.model,
                messages=payload,
                temperature=self._config.temperature,
                max_tokens=self._config.max_tokens,
            )
        except OpenAIError as exc:
            logger.exception("OpenAI API request failed.")
            raise GenerationRequestError(f"OpenAI request failed: {exc}") from exc

        content = ""
        if response.choices:
            content = response.choices[0].message.content or ""
        usage = None
        if response.usage is not None:
            usage = TokenUsage(
                prompt_tokens=response.usage.prompt_tokens,
                completion_tokens=response.usage.completion_tokens,
                total_tokens=response.usage.total_tokens,
            )
        return ChatReply(content=content, usage=usage)
