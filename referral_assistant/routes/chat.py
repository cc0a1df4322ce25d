"""Referral conversation and speech transcript cleanup endpoints.

User-authored text is masked again here before it reaches the LLM, even
though well-behaved clients mask it before sending.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from ..config import settings
from ..llm.client import LLMUnavailableError, OpenAIClient, get_llm_client
from ..llm.prompts import (
    CLEAN_TEXT_SYSTEM_PROMPT,
    build_clean_text_prompt,
    build_system_prompt,
    extract_referral_letter,
)
from ..masking.pipeline import masker
from ..masking.term_protector import ClinicalTerms
from ..schemas import (
    ChatRequest,
    ChatResponse,
    CleanTextRequest,
    CleanTextResponse,
    MessageRole,
)
from ..terms.loader import get_clinical_terms

logger = logging.getLogger(__name__)

router = APIRouter()


def _mask_user_text(text: str, terms: ClinicalTerms) -> str:
    if not settings.MASKING_ENABLED:
        return text
    return masker.mask(text, terms)


@router.post("/chat")
async def chat(
    request: ChatRequest,
    terms: Annotated[ClinicalTerms, Depends(get_clinical_terms)],
    llm: Annotated[OpenAIClient, Depends(get_llm_client)],
) -> ChatResponse:
    """Continue the referral conversation; an empty history starts it."""
    messages = [{"role": "system", "content": build_system_prompt()}]
    for message in request.messages:
        content = message.content
        if message.role == MessageRole.USER:
            content = _mask_user_text(content, terms)
        messages.append({"role": message.role.value, "content": content})

    try:
        response = await llm.generate(messages, temperature=settings.CHAT_TEMPERATURE)
    except LLMUnavailableError:
        raise
    except Exception:
        logger.exception("Chat completion failed")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="chat エラー")

    reply = response.content.strip()
    return ChatResponse(reply=reply, letter=extract_referral_letter(reply))


@router.post("/clean-text")
async def clean_text(
    request: CleanTextRequest,
    terms: Annotated[ClinicalTerms, Depends(get_clinical_terms)],
    llm: Annotated[OpenAIClient, Depends(get_llm_client)],
) -> CleanTextResponse:
    """Correct speech recognition errors in a masked transcript."""
    masked = _mask_user_text(request.raw_text, terms)
    messages = [
        {"role": "system", "content": CLEAN_TEXT_SYSTEM_PROMPT},
        {"role": "user", "content": build_clean_text_prompt(masked)},
    ]

    try:
        response = await llm.generate(
            messages, temperature=settings.CLEAN_TEXT_TEMPERATURE, purpose="clean_text"
        )
    except LLMUnavailableError:
        raise
    except Exception:
        logger.exception("Transcript cleanup failed")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="clean-text エラー")

    return CleanTextResponse(cleaned_text=response.content.strip() or masked)
