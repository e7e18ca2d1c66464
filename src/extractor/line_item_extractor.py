"""
Line Item Extractor
===================
Segments a normalized receipt transcript into ParsedLineItem records.

Lines are processed in document order. Each non-blank line has its
trailing tax markers stripped and then runs through the ordered rules in
extractor.line_rules; the first rule with an opinion decides the line.
Accepted lines are deduplicated per call (receipts sometimes echo a line),
so the output keeps the order of first acceptance.

Never raises: a line that cannot be read is dropped and logged at DEBUG.
"""

from typing import List, Optional, Sequence

from loguru import logger

from extractor.line_rules import (
    DEFAULT_RULES,
    Accepted,
    LineOutcome,
    LineRule,
    Rejected,
)
from models import ParsedLineItem
from text_normalizer import TextNormalizer


class LineItemExtractor:
    """
    Usage
    -----
    extractor = LineItemExtractor()
    items = extractor.extract(normalizer.normalize(raw_text))
    """

    def __init__(
        self,
        normalizer: Optional[TextNormalizer] = None,
        rules: Sequence[LineRule] = DEFAULT_RULES,
    ):
        self.normalizer = normalizer or TextNormalizer()
        self.rules = tuple(rules)

    def extract(self, normalized_text: str) -> List[ParsedLineItem]:
        items: List[ParsedLineItem] = []
        seen: set = set()

        for line in self._lines(normalized_text):
            cleaned = self.normalizer.strip_tax_markers(line)
            outcome = self.classify_line(cleaned, accepted_count=len(items))

            if isinstance(outcome, Rejected):
                logger.debug(f"[LineItemExtractor] drop {line!r}: {outcome.reason}")
                continue
            if outcome.key in seen:
                logger.debug(f"[LineItemExtractor] duplicate {line!r}")
                continue

            seen.add(outcome.key)
            items.append(outcome.item)

        logger.info(f"[LineItemExtractor] {len(items)} items extracted")
        return items

    def classify_line(self, line: str, accepted_count: int = 0) -> LineOutcome:
        """Run the rules over one cleaned line and return the first outcome."""
        for rule in self.rules:
            outcome = rule(line, accepted_count)
            if outcome is not None:
                return outcome
        return Rejected("no rule matched")

    @staticmethod
    def _lines(text: str) -> List[str]:
        if not text:
            return []
        return [l.strip() for l in text.splitlines() if l.strip()]
