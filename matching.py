"""
VendorScrub — Vendor identification rule.

Matching is deliberately broad: a plain case-insensitive "contains one of
these words" test, optionally extended by regular expressions. False
positives are caught at the confirmation prompt, not here.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional


class MatchRule:
    """Case-insensitive substring / regex predicate over candidate names."""

    def __init__(self, terms: Iterable[str], patterns: Optional[Iterable[str]] = None):
        self.terms: List[str] = [t.casefold() for t in terms if t]
        self.patterns = [re.compile(p, re.IGNORECASE) for p in (patterns or [])]

    def matches(self, text: Optional[str]) -> bool:
        if not text:
            return False
        folded = text.casefold()
        for term in self.terms:
            if term in folded:
                return True
        for pattern in self.patterns:
            if pattern.search(text):
                return True
        return False

    def matches_any(self, *texts: Optional[str]) -> bool:
        """True if any of the candidate texts matches (e.g. value name OR value data)."""
        return any(self.matches(text) for text in texts)

    def __repr__(self) -> str:
        return f"MatchRule(terms={self.terms!r}, patterns={[p.pattern for p in self.patterns]!r})"
