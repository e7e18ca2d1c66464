"""
Line Rules
==========
Per-line classification rules for LineItemExtractor.

Each rule looks at one trimmed, tax-marker-free receipt line and either
declines (returns None, so the next rule runs) or returns a tagged outcome:

  Accepted(item, key)   the line is a purchase; key is the dedup key
  Rejected(reason)      the line is dropped; reason is for debug logs

Rule order (first non-None outcome wins)
----------------------------------------
  skip_rule       "TOTAL", "HST", "04/12/24", "12:45", "#123" ...
  weighted_rule   "2.5kg @ 1.99/kg GROUND BEEF"
  generic_rule    "MILK 2% 4.99", "2 x 1.49 BREAD", "$12.50 STEAK"

Dropping a line is never an error; a bad line cannot affect its neighbours.
"""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional, Tuple, Union

from models import MAX_ITEM_PRICE, ParsedLineItem
from text_normalizer import TextNormalizer


# ─── Outcomes ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Accepted:
    item: ParsedLineItem
    key: Tuple


@dataclass(frozen=True)
class Rejected:
    reason: str


LineOutcome = Union[Accepted, Rejected]
LineRule = Callable[[str, int], Optional[LineOutcome]]


# ─── Patterns ─────────────────────────────────────────────────────────────────

SKIP_TERMS = (
    'total', 'subtotal', 'tax', 'hst', 'gst',
    'change', 'cash', 'card', 'debit', 'credit',
)

_SKIP_PATTERNS = [
    re.compile(r'^(?:' + '|'.join(SKIP_TERMS) + r')\s*:?$', re.IGNORECASE),
    re.compile(r'^\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4}$'),                       # 04/12/24
    re.compile(r'^\d{1,2}:\d{2}(?::\d{2})?(?:\s*[AP]\.?M\.?)?$', re.IGNORECASE),  # 12:45
    re.compile(r'^#\d+$'),                                                  # #123
]

# 2.5kg @ 1.99/kg   (the trailing /kg is optional; sub-cent rates like 1.999 are kept whole)
_WEIGHTED = re.compile(
    r'(?<![\d.])(\d+(?:\.\d+)?)\s*kg\s*@\s*\$?(\d+(?:\.\d+)?)(?!\d)(?:\s*/\s*kg\b)?',
    re.IGNORECASE,
)

# $4.99, 12.50, 1,299.00 -- but not 2%, 355ML, 12:45, 04/12, #123, 604-555
_PRICE_TOKEN = re.compile(
    r'(?<![\w.,%:/#\-])\$?((?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d{1,2})?)'
    r'(?![\w%:/\-]|[.,]\d)'
)

# "2 x", "3X", "2 @" at the very start of a line
_QTY_PREFIX = re.compile(r'^(\d+)\s*[xX@](?![A-Za-z])\s*')

_MAX_UNIT_PRICE = Decimal('1000')

_normalizer = TextNormalizer()


# ─── Helpers ──────────────────────────────────────────────────────────────────

def is_skip_text(text: str) -> bool:
    """True if the whole text is a non-item term, date, time or receipt number."""
    s = text.strip()
    return any(p.match(s) for p in _SKIP_PATTERNS)


def collapse_whitespace(text: str) -> str:
    return re.sub(r'\s+', ' ', text).strip()


def synthetic_name(accepted_count: int) -> str:
    return f"Item {accepted_count + 1}"


def to_decimal(raw: str) -> Optional[Decimal]:
    try:
        value = Decimal(raw.replace(',', ''))
    except (InvalidOperation, ValueError):
        return None
    return value if value.is_finite() else None


def looks_like_date(raw_price: str) -> bool:
    """
    "12.05" could just as well be 12 May. Both halves <= 31 with a
    one- or two-digit fraction is treated as a date, not a price.
    """
    int_part, _, frac_part = raw_price.replace(',', '').partition('.')
    if not frac_part or len(frac_part) > 2:
        return False
    return int(int_part or '0') <= 31 and int(frac_part) <= 31


def split_quantity(line: str) -> Tuple[int, str]:
    """Return (quantity, rest of line) for a leading "2 x" / "3@" prefix."""
    m = _QTY_PREFIX.match(line)
    if not m:
        return 1, line
    return int(m.group(1)) or 1, line[m.end():]


# ─── Rules ────────────────────────────────────────────────────────────────────

def skip_rule(line: str, accepted_count: int) -> Optional[LineOutcome]:
    if is_skip_text(line):
        return Rejected("non-item line")
    return None


def weighted_rule(line: str, accepted_count: int) -> Optional[LineOutcome]:
    m = _WEIGHTED.search(line)
    if not m:
        return None

    weight = to_decimal(m.group(1))
    unit_price = to_decimal(m.group(2))
    if weight is None or weight <= 0:
        return Rejected(f"weighted: bad weight {m.group(1)!r}")
    if unit_price is None or unit_price <= 0 or unit_price >= _MAX_UNIT_PRICE:
        return Rejected(f"weighted: unit price out of range {m.group(2)!r}")

    name = collapse_whitespace(line[:m.start()] + ' ' + line[m.end():])
    if len(name) < 2:
        name = synthetic_name(accepted_count)

    item = ParsedLineItem(item_name=name, price=unit_price, quantity=weight)
    return Accepted(item, key=(name, unit_price, weight))


def generic_rule(line: str, accepted_count: int) -> Optional[LineOutcome]:
    quantity, body = split_quantity(line)

    tokens = list(_PRICE_TOKEN.finditer(body))
    if not tokens:
        return Rejected("no price")

    raw_price = tokens[-1].group(1)
    price = to_decimal(raw_price)
    if price is None or price <= 0 or price > MAX_ITEM_PRICE:
        return Rejected(f"price out of range {raw_price!r}")
    if looks_like_date(raw_price):
        return Rejected(f"date-like price {raw_price!r}")

    name = _PRICE_TOKEN.sub(' ', body)
    name = collapse_whitespace(_normalizer.strip_tax_markers(name))
    if is_skip_text(name):
        return Rejected(f"non-item name {name!r}")
    if len(name) < 2:
        name = synthetic_name(accepted_count)

    item = ParsedLineItem(item_name=name, price=price, quantity=Decimal(quantity))
    return Accepted(item, key=(name, price))


DEFAULT_RULES: Tuple[LineRule, ...] = (skip_rule, weighted_rule, generic_rule)
