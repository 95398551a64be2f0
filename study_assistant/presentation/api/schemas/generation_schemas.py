"""Pydantic schemas for text generation endpoints."""

from typing import Literal, Optional

from pydantic import BaseModel, Field


class AcademicWorkRequest(BaseModel):
    work_type: str = Field(..., min_length=1)
    topic: str = Field(..., min_length=1)
    requirements: Optional[str] = None
    pages: Optional[str] = None


class HomeworkRequest(BaseModel):
    subject: str = Field(..., min_length=1)
    level: str = Field(..., min_length=1)
    task: str = Field(..., min_length=1)


class PlagiarismRequest(BaseModel):
    text: str = ""


class GeneratedTextResponse(BaseModel):
    text: str


class PlagiarismResponse(BaseModel):
    uniqueness_score: int
    report: str


class ChatMessageSchema(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    messages: list[ChatMessageSchema] = Field(..., min_length=1)


class WorkRequestSchema(BaseModel):
    work_type: str
    topic: str
    requirements: str
    pages: str


class ChatResponse(BaseModel):
    content: str
    extraction: Literal["none", "parsed", "malformed"]
    work_request: Optional[WorkRequestSchema] = None
    extraction_error: Optional[str] = None
