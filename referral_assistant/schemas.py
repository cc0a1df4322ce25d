"""Pydantic schemas for the referral assistant API."""

import enum

from pydantic import BaseModel, Field

MAX_TEXT_LENGTH = 50_000


class MessageRole(str, enum.Enum):
    USER = "user"
    ASSISTANT = "assistant"


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    terms_loaded: bool
    term_count: int


class TermListResponse(BaseModel):
    terms: list[str]


class MaskRequest(BaseModel):
    text: str = Field(default="", max_length=MAX_TEXT_LENGTH)


class MaskResponse(BaseModel):
    masked_text: str
    redactions: dict[str, int] = {}
    protected_terms: int = 0


class ChatMessage(BaseModel):
    role: MessageRole
    content: str = Field(max_length=MAX_TEXT_LENGTH)


class ChatRequest(BaseModel):
    messages: list[ChatMessage] = []


class ChatResponse(BaseModel):
    reply: str
    letter: str | None = None


class CleanTextRequest(BaseModel):
    raw_text: str = Field(min_length=1, max_length=MAX_TEXT_LENGTH)


class CleanTextResponse(BaseModel):
    cleaned_text: str
