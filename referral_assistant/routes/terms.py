"""Clinical term list endpoint consumed by masking clients."""

import logging

from fastapi import APIRouter, HTTPException, status

from ..schemas import TermListResponse
from ..terms.source import read_term_file

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/disease-terms")
async def get_disease_terms() -> TermListResponse:
    """Return the raw clinical term list; clients normalize it themselves."""
    try:
        terms = read_term_file()
    except (OSError, ValueError) as e:
        logger.error(f"Clinical term file unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Clinical term list unavailable",
        )
    return TermListResponse(terms=terms)
