"""
Store Identifier
================
Names the merchant that issued a receipt from its header lines.

Only the first few non-blank lines are read (store identity always sits in
the header), lower-cased and joined with single spaces. Two passes:

  1. Local gems: a closed, hand-maintained list of independent Vancouver
     merchants. Substring match; first hit wins and yields the curated
     display name with store_type LOCAL_GEM.

  2. Chains: one regex alternation of national grocery chains. The
     matched text becomes the store name, store_type STANDARD.

No match → store_name None, store_type STANDARD. Never raises.

The store_type feeds the reward tier: local gems earn more credits than
standard stores (the amounts are decided elsewhere).
"""

import re
from typing import Optional, Tuple

from loguru import logger

from models import StoreExtraction, StoreType


# ─── Curated merchant tables ──────────────────────────────────────────────────

# (search term, display name). Order matters: first match wins.
LOCAL_GEMS: Tuple[Tuple[str, str], ...] = (
    ("aria", "Aria"),
    ("kin's", "Kin's Market"),
    ("kins market", "Kin's Market"),
    ("donald's", "Donald's Market"),
    ("donalds market", "Donald's Market"),
    ("persia foods", "Persia Foods"),
    ("famous foods", "Famous Foods"),
    ("sunrise market", "Sunrise Market"),
    ("stong's", "Stong's"),
    ("stongs", "Stong's"),
)

CHAIN_PATTERN = re.compile(
    r'\b(loblaws|superstore|real canadian|save[- ]?on|safeway|walmart|'
    r'costco|whole foods|t&t|tnt)\b',
    re.IGNORECASE,
)

DEFAULT_HEADER_LINES = 10

# receipt lines end in \n or \r\n; form feeds and unicode separators are not breaks
_LINE_BREAK = re.compile(r'\r?\n')


class StoreIdentifier:
    """
    Usage
    -----
    identifier = StoreIdentifier()
    store = identifier.identify(raw_text)
    # store.store_name: str | None
    # store.store_type: StoreType.LOCAL_GEM | StoreType.STANDARD
    """

    def __init__(self, header_lines: int = DEFAULT_HEADER_LINES):
        self.header_lines = header_lines

    def identify(self, raw_text: str) -> StoreExtraction:
        header = self._header(raw_text)
        if not header:
            return StoreExtraction(store_name=None, store_type=StoreType.STANDARD)

        # ── Pass 1: curated local gems ───────────────────────────────────────
        for search, display_name in LOCAL_GEMS:
            if search in header:
                logger.debug(f"[StoreIdentifier] local gem {display_name!r} (term {search!r})")
                return StoreExtraction(store_name=display_name, store_type=StoreType.LOCAL_GEM)

        # ── Pass 2: national chains ──────────────────────────────────────────
        m = CHAIN_PATTERN.search(header)
        if m:
            logger.debug(f"[StoreIdentifier] chain {m.group(1)!r}")
            return StoreExtraction(store_name=m.group(1), store_type=StoreType.STANDARD)

        logger.debug("[StoreIdentifier] no store match")
        return StoreExtraction(store_name=None, store_type=StoreType.STANDARD)

    def _header(self, raw_text: Optional[str]) -> str:
        if not raw_text:
            return ""
        lines = [l.strip().lower() for l in _LINE_BREAK.split(raw_text) if l.strip()]
        return " ".join(lines[:self.header_lines])
