"""API router for text generation features."""

from fastapi import APIRouter, Depends, HTTPException, status

from ....core.dependencies import get_text_gateway
from ....domain.models.generation import ChatMessage
from ....services.text_generation import GenerationRequestError, TextGenerationGateway
from ....services.work_request_parser import INTAKE_SYSTEM_PROMPT, parse_assistant_reply
from ..schemas.generation_schemas import (
    AcademicWorkRequest,
    ChatRequest,
    ChatResponse,
    GeneratedTextResponse,
    HomeworkRequest,
    PlagiarismRequest,
    PlagiarismResponse,
    WorkRequestSchema,
)

router = APIRouter(prefix="/api/generation", tags=["Generation"])

REQUEST_FAILED_MESSAGE = "Извините, произошла ошибка. Проверьте настройки API или попробуйте позже."


def _request_failed() -> HTTPException:
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=REQUEST_FAILED_MESSAGE)


@router.post("/academic-work", response_model=GeneratedTextResponse)
async def generate_academic_work(
    request: AcademicWorkRequest,
    gateway: TextGenerationGateway = Depends(get_text_gateway),
) -> GeneratedTextResponse:
    try:
        text = await gateway.generate_academic_work(
            work_type=request.work_type,
            topic=request.topic,
            requirements=request.requirements,
            pages=request.pages,
        )
    except GenerationRequestError as exc:
        raise _request_failed() from exc
    return GeneratedTextResponse(text=text)


@router.post("/homework", response_model=GeneratedTextResponse)
async def solve_homework(
    request: HomeworkRequest,
    gateway: TextGenerationGateway = Depends(get_text_gateway),
) -> GeneratedTextResponse:
    try:
        text = await gateway.solve_homework(request.subject, request.level, request.task)
    except GenerationRequestError as exc:
        raise _request_failed() from exc
    return GeneratedTextResponse(text=text)


@router.post("/plagiarism", response_model=PlagiarismResponse)
async def check_plagiarism(
    request: PlagiarismRequest,
    gateway: TextGenerationGateway = Depends(get_text_gateway),
) -> PlagiarismResponse:
    """Score uniqueness and return advice; the score is a placeholder."""
    result = await gateway.check_plagiarism(request.text)
    return PlagiarismResponse(uniqueness_score=result.uniqueness_score, report=result.report)


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    gateway: TextGenerationGateway = Depends(get_text_gateway),
) -> ChatResponse:
    """Work-type intake conversation; extracts the request once it is complete."""
    messages = [ChatMessage(role="system", content=INTAKE_SYSTEM_PROMPT)]
    messages.extend(ChatMessage(role=item.role, content=item.content) for item in request.messages)
    try:
        reply = await gateway.chat(messages)
    except GenerationRequestError as exc:
        raise _request_failed() from exc

    parsed = parse_assistant_reply(reply.content)
    work_request = None
    if parsed.work_request is not None:
        work_request = WorkRequestSchema(
            work_type=parsed.work_request.work_type,
            topic=parsed.work_request.topic,
            requirements=parsed.work_request.requirements,
            pages=parsed.work_request.pages,
        )
    return ChatResponse(
        content=parsed.content,
        extraction=parsed.kind.value,
        work_request=work_request,
        extraction_error=parsed.error,
    )
