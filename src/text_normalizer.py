"""
Text Normalizer
Narrow, anchored fixes for systematic OCR misreads on receipt text

Rules (applied to the whole transcript):
1. S4.99  → $4.99   stray capital S read in place of the dollar sign
2. 4O     → 40      trailing capital O read in place of zero
3. l49    → 149     lowercase L read in place of a leading one

Line-level pass:
4. "MILK 4.99 H" → "MILK 4.99"   trailing GST / PST / HST flags

Every pattern is anchored on word boundaries and none of them matches its
own output, so normalizing twice is the same as normalizing once.
Anything outside these rules is left alone: this is not a spell checker.
"""

import re
from typing import Dict, List

from loguru import logger


# ─── Character rules ──────────────────────────────────────────────────────────

_CHARACTER_RULES = [
    # (name, pattern, replacement)
    ('dollar_sign', re.compile(r'\bS(\d+(?:\.\d+)?)\b'), r'$\1'),
    ('trailing_zero', re.compile(r'\b(\d+)O\b'), r'\g<1>0'),
    ('leading_one', re.compile(r'\bl(\d+)\b'), r'1\1'),
]

# One or more standalone G / P / H tokens at the end of a line
_TAX_MARKERS = re.compile(r'(?:\s+[GPH])+\s*$', re.IGNORECASE)

_LINE_BREAK = re.compile(r'(\r?\n)')


class TextNormalizer:
    """
    Corrects OCR character substitutions and strips tax markers.

    Usage
    -----
    normalizer = TextNormalizer()
    clean = normalizer.normalize(raw_text)
    line  = normalizer.strip_tax_markers("EGGS 3.99 G")
    """

    def normalize(self, raw: str) -> str:
        """
        Apply the character rules to the whole transcript, then strip
        trailing tax markers from every line. Line breaks are kept.

        Pure and total: never raises, returns "" for empty input.
        """
        if not raw:
            return ""

        text = raw
        for name, pattern, replacement in _CHARACTER_RULES:
            fixed = pattern.sub(replacement, text)
            if fixed != text:
                logger.debug(f"[TextNormalizer] rule {name} applied")
            text = fixed

        # odd indexes are the captured line breaks
        parts = _LINE_BREAK.split(text)
        parts[::2] = [self.strip_tax_markers(line) for line in parts[::2]]
        return ''.join(parts)

    def strip_tax_markers(self, line: str) -> str:
        """Remove trailing standalone tax flags (G/P/H) from one line."""
        if not line:
            return line
        return _TAX_MARKERS.sub('', line)

    def normalize_lines(self, lines: List[str]) -> List[str]:
        """Normalize a list of lines one by one."""
        return [self.normalize(line) for line in lines]

    def correction_report(self, raw: str) -> Dict:
        """Report which lines of a transcript were changed, for diagnostics."""
        lines = raw.splitlines() if raw else []
        corrections = []
        for i, line in enumerate(lines):
            corrected = self.normalize(line)
            if corrected != line:
                corrections.append({
                    'line_number': i + 1,
                    'original': line,
                    'corrected': corrected,
                })
        return {
            'total_lines': len(lines),
            'lines_corrected': len(corrections),
            'correction_rate': len(corrections) / len(lines) if lines else 0,
            'corrections': corrections,
        }
