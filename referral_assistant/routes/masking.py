"""PII masking endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends

from ..masking.pipeline import masker
from ..masking.term_protector import ClinicalTerms
from ..schemas import MaskRequest, MaskResponse
from ..terms.loader import get_clinical_terms

router = APIRouter()


@router.post("/mask")
async def mask_text(
    request: MaskRequest,
    terms: Annotated[ClinicalTerms, Depends(get_clinical_terms)],
) -> MaskResponse:
    """Mask PII in free text, preserving loaded clinical terms."""
    result = masker.mask_with_report(request.text, terms)
    return MaskResponse(**result.to_dict())
