"""
Extractor package: turns normalized receipt text into line items.

Line classification lives in line_rules (ordered rules returning tagged
Accepted / Rejected outcomes); LineItemExtractor drives them over a
transcript and deduplicates the result.

Usage
-----
from extractor import LineItemExtractor
items = LineItemExtractor().extract(normalized_text)
"""

from extractor.line_item_extractor import LineItemExtractor
from extractor.line_rules import Accepted, Rejected

__all__ = ["LineItemExtractor", "Accepted", "Rejected"]
