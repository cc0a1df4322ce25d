"""One-shot loader for the clinical term allow-list."""

import logging

import httpx

from ..config import settings
from ..masking.term_protector import EMPTY_TERMS, ClinicalTerms
from ..metrics import TERM_LIST_LOADS_TOTAL

logger = logging.getLogger(__name__)


class TermListError(ValueError):
    """The term list response could not be interpreted."""


def parse_term_payload(payload: object) -> list[str]:
    """Extract the ``terms`` array from a ``{"terms": [...]}`` body.

    Non-string entries are skipped.
    """
    if not isinstance(payload, dict):
        raise TermListError("term list body is not a JSON object")
    terms = payload.get("terms")
    if not isinstance(terms, list):
        raise TermListError("term list body has no 'terms' array")
    return [term for term in terms if isinstance(term, str)]


class TermListLoader:
    """Fetch the clinical term list once and hold the normalized snapshot.

    A failed fetch leaves the list empty: masking keeps working, only
    without clinical term protection.
    """

    def __init__(self, url: str | None = None, timeout: float | None = None):
        self.url = settings.TERM_LIST_URL if url is None else url
        self.timeout = timeout if timeout is not None else settings.TERM_LIST_TIMEOUT_SECONDS
        self.terms: ClinicalTerms = EMPTY_TERMS
        self.loaded: bool = False

    async def load(self) -> ClinicalTerms:
        """Fetch and store the term list. Never raises."""
        if not self.url:
            logger.info("Term list URL not configured; masking without term protection")
            TERM_LIST_LOADS_TOTAL.labels(outcome="disabled").inc()
            return self.terms

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.url)
            response.raise_for_status()
            raw_terms = parse_term_payload(response.json())
        except Exception as e:
            # Any failure, including a malformed URL, leaves masking without term protection
            logger.warning(f"Failed to load clinical term list from {self.url}: {e}")
            self.terms = EMPTY_TERMS
            self.loaded = False
            TERM_LIST_LOADS_TOTAL.labels(outcome="failed").inc()
            return self.terms

        self.terms = ClinicalTerms.from_iterable(raw_terms)
        self.loaded = True
        TERM_LIST_LOADS_TOTAL.labels(outcome="loaded").inc()
        logger.info(f"Loaded {len(self.terms)} clinical terms")
        return self.terms


term_list_loader = TermListLoader()


def get_clinical_terms() -> ClinicalTerms:
    """FastAPI dependency returning the currently loaded allow-list."""
    return term_list_loader.terms
