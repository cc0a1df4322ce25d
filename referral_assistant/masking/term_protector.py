"""Clinical term protection for the masking pipeline.

Clinical terms are swapped for placeholder tokens before redaction rules run
and swapped back afterwards, so rules that look for names or addresses never
see (and never mutilate) disease vocabulary.
"""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

TOKEN_PREFIX = "__MASKTERM"
TOKEN_SUFFIX = "__"

# token -> original term
ProtectionMap = dict[str, str]


_TOKEN_PATTERN = re.compile(rf"({re.escape(TOKEN_PREFIX)}[0-9]{{4,}}{re.escape(TOKEN_SUFFIX)})")


def make_token(index: int) -> str:
    """Build the placeholder for the ``index``-th protected term."""
    return f"{TOKEN_PREFIX}{index:04d}{TOKEN_SUFFIX}"


def _replace_outside_tokens(text: str, matcher: re.Pattern, token: str) -> tuple[str, int]:
    # Split keeps the tokens at odd indexes; only the text between them is searched
    parts = _TOKEN_PATTERN.split(text)
    total = 0
    for i in range(0, len(parts), 2):
        parts[i], count = matcher.subn(lambda _m: token, parts[i])
        total += count
    return "".join(parts), total


def normalize_terms(raw_terms: Iterable[str]) -> tuple[str, ...]:
    """Trim, drop empties and duplicates, then order longest first.

    The sort is stable, so terms of equal length keep their source order.
    """
    seen: set[str] = set()
    terms: list[str] = []
    for raw in raw_terms:
        term = raw.strip()
        if not term or term in seen:
            continue
        seen.add(term)
        terms.append(term)
    return tuple(sorted(terms, key=len, reverse=True))


@dataclass(frozen=True)
class ClinicalTerms:
    """Immutable snapshot of the clinical term allow-list."""

    terms: tuple[str, ...] = ()

    @classmethod
    def from_iterable(cls, raw_terms: Iterable[str]) -> "ClinicalTerms":
        return cls(normalize_terms(raw_terms))

    def __len__(self) -> int:
        return len(self.terms)

    def __iter__(self):
        return iter(self.terms)

    def __bool__(self) -> bool:
        return bool(self.terms)


EMPTY_TERMS = ClinicalTerms()


def protect(text: str, terms: Sequence[str] | ClinicalTerms | None) -> tuple[str, ProtectionMap]:
    """Replace every allow-listed term in ``text`` with a placeholder token.

    Terms are visited in the order given; callers pass a longest-first list
    so a long phrase is claimed before any of its substrings. All occurrences
    of a term share one token. Tokens placed for earlier terms are never
    searched, so a short term such as ``AS`` cannot split one.
    Returns (protected_text, protection_map).
    """
    protection_map: ProtectionMap = {}
    if not text or not terms:
        return text, protection_map

    protected = text
    counter = 0
    for term in terms:
        if not term:
            continue
        token = make_token(counter)
        protected, found = _replace_outside_tokens(protected, re.compile(re.escape(term)), token)
        if not found:
            continue
        protection_map[token] = term
        counter += 1

    return protected, protection_map


def restore(text: str, protection_map: ProtectionMap | None) -> str:
    """Put the original terms back in place of their tokens."""
    if not text or not protection_map:
        return text

    restored = text
    for token, term in protection_map.items():
        restored = restored.replace(token, term)
    return restored
