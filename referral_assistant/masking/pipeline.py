"""Masking pipeline: protect clinical terms, redact PII, restore terms."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..metrics import MASK_REQUESTS_TOTAL, REDACTIONS_TOTAL
from .rules import RULES, RedactionRule
from .term_protector import ClinicalTerms, protect, restore

logger = logging.getLogger(__name__)


@dataclass
class MaskingResult:
    """Outcome of one masking call."""

    text: str
    redactions: dict[str, int] = field(default_factory=dict)
    protected_terms: int = 0

    @property
    def has_pii(self) -> bool:
        return bool(self.redactions)

    def to_dict(self) -> dict:
        return {
            "masked_text": self.text,
            "redactions": dict(self.redactions),
            "protected_terms": self.protected_terms,
        }


def apply_rules(text: str, rules: Sequence[RedactionRule] = RULES) -> tuple[str, dict[str, int]]:
    """Run every rule in order over ``text``.

    A rule that raises is logged and skipped; the remaining rules still run.
    Returns (transformed_text, counts_by_category).
    """
    counts: dict[str, int] = {}
    transformed = text
    for rule in rules:
        try:
            transformed, n = rule.apply(transformed)
        except Exception:
            logger.exception(f"Redaction rule {rule.name} failed; skipping")
            continue
        if n:
            key = rule.category.value
            counts[key] = counts.get(key, 0) + n
    return transformed, counts


class Masker:
    """Mask PII in clinician free text before it leaves the service."""

    def __init__(self, rules: Sequence[RedactionRule] = RULES):
        self.rules = tuple(rules)

    def mask_with_report(
        self, text: str | None, terms: Sequence[str] | ClinicalTerms | None = None
    ) -> MaskingResult:
        """Mask ``text`` and report what was redacted."""
        if not text:
            return MaskingResult(text=text)

        protected, protection_map = protect(text, terms)
        transformed, counts = apply_rules(protected, self.rules)
        masked = restore(transformed, protection_map)

        MASK_REQUESTS_TOTAL.inc()
        for category, n in counts.items():
            REDACTIONS_TOTAL.labels(category=category).inc(n)

        if counts:
            logger.info(
                f"PII masked: {sum(counts.values())} spans of types {sorted(counts)} "
                f"({len(protection_map)} clinical terms protected)"
            )

        return MaskingResult(text=masked, redactions=counts, protected_terms=len(protection_map))

    def mask(self, text: str | None, terms: Sequence[str] | ClinicalTerms | None = None) -> str:
        """Return ``text`` with PII replaced by category markers."""
        return self.mask_with_report(text, terms).text


masker = Masker()


def mask(text: str | None, terms: Sequence[str] | ClinicalTerms | None = None) -> str:
    """Mask ``text``; without ``terms`` the process-wide allow-list is used."""
    if terms is None:
        from ..terms.loader import term_list_loader

        terms = term_list_loader.terms
    return masker.mask(text, terms)
