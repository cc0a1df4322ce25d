"""Clinical term file served to masking clients."""

import json
import logging
from pathlib import Path

from ..config import settings
from .loader import parse_term_payload

logger = logging.getLogger(__name__)


def read_term_file(path: Path | None = None) -> list[str]:
    """Read ``{"terms": [...]}`` from disk.

    Raises OSError or ValueError when the file is missing or malformed.
    """
    path = path or settings.TERM_FILE_PATH
    with open(path, encoding="utf-8") as f:
        payload = json.load(f)
    terms = parse_term_payload(payload)
    logger.debug(f"Read {len(terms)} clinical terms from {path}")
    return terms
