"""PII masking engine."""

from referral_assistant.masking.pipeline import Masker, MaskingResult, apply_rules, mask, masker
from referral_assistant.masking.rules import RULES, RedactionCategory, RedactionRule
from referral_assistant.masking.term_protector import (
    EMPTY_TERMS,
    ClinicalTerms,
    ProtectionMap,
    normalize_terms,
    protect,
    restore,
)

__all__ = [
    "ClinicalTerms",
    "EMPTY_TERMS",
    "Masker",
    "MaskingResult",
    "ProtectionMap",
    "RULES",
    "RedactionCategory",
    "RedactionRule",
    "apply_rules",
    "mask",
    "masker",
    "normalize_terms",
    "protect",
    "restore",
]
