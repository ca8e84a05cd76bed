"""Tracked keyword set: validation of updates and loading from YAML."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from mentionpulse import config

logger = logging.getLogger(__name__)


class KeywordValidationError(ValueError):
    """Raised when a keyword update is not a list of strings or a comma string."""


def parse_keywords(value: Any) -> list[str]:
    """Normalise a keyword update into a list of stripped strings.

    Accepts a list of strings (possibly empty) or a non-empty comma-separated
    string. Blank entries are dropped, so the result may be empty.
    """
    if isinstance(value, str):
        if not value:
            raise KeywordValidationError("keywords required")
        items = value.split(",")
    elif isinstance(value, list):
        if not all(isinstance(item, str) for item in value):
            raise KeywordValidationError("keywords must all be strings")
        items = value
    else:
        raise KeywordValidationError(
            f"keywords must be a list or a comma-separated string, got {type(value).__name__}"
        )

    return [item.strip() for item in items if item.strip()]


def load_keywords(path: Path) -> list[str]:
    """Read the ``keywords`` list from a YAML file, or fall back to defaults."""
    if not path.exists():
        logger.warning("Keywords file not found, using defaults: %s", path)
        return list(config.DEFAULT_KEYWORDS)

    with open(path) as fh:
        cfg: dict[str, Any] = yaml.safe_load(fh) or {}

    keywords = parse_keywords(cfg.get("keywords", []))
    logger.info("Loaded %d keywords from %s", len(keywords), path)
    return keywords
