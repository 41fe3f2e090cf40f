"""
Value normalization for cross-policy setting comparison.
"""
import logging
from typing import Any

from conflict_engine.config import settings

logger = logging.getLogger(__name__)

CANONICAL_TRUE = "true"
CANONICAL_FALSE = "false"
CANONICAL_NOT_CONFIGURED = "not configured"

TRUTHY_TOKENS = frozenset({"true", "enabled", "allow", "yes", "1"})
FALSY_TOKENS = frozenset({"false", "disabled", "block", "no", "0"})
NOT_CONFIGURED_TOKENS = frozenset({"not configured", "notconfigured"})

# Catalog choice values carry their path before the last separator
CATALOG_PATH_SEPARATOR = "~"


def clean_value(raw: Any) -> str:
    """Strip the catalog path prefix, turn underscores into spaces, lower-case and trim."""
    if raw is None:
        return ""
    text = raw if isinstance(raw, str) else render_scalar(raw)
    text = text.rsplit(CATALOG_PATH_SEPARATOR, 1)[-1]
    return text.replace("_", " ").lower().strip()


def normalize(raw: Any, treat_not_configured_as_disabled: bool = None) -> str:
    """
    Canonicalize a recorded setting value into a comparable token.

    The whole cleaned value is matched against closed truthy and falsy
    token sets, never a substring of it, so "disabled for guests" stays
    as it is. Anything outside the sets passes through cleaned.

    Args:
        raw: Recorded value
        treat_not_configured_as_disabled: Map "not configured" to the falsy
            token; defaults to the TREAT_NOT_CONFIGURED_AS_DISABLED setting

    Returns:
        Canonical "true"/"false" or the cleaned value
    """
    if treat_not_configured_as_disabled is None:
        treat_not_configured_as_disabled = settings.TREAT_NOT_CONFIGURED_AS_DISABLED

    cleaned = clean_value(raw)
    if cleaned in TRUTHY_TOKENS:
        return CANONICAL_TRUE
    if cleaned in FALSY_TOKENS:
        return CANONICAL_FALSE
    if cleaned in NOT_CONFIGURED_TOKENS:
        return CANONICAL_FALSE if treat_not_configured_as_disabled else CANONICAL_NOT_CONFIGURED
    return cleaned


def render_scalar(value: Any) -> str:
    """Render a payload scalar as text, booleans in lower case and integral floats as integers."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
