"""
VendorScrub — Confirmation gate contract and the non-interactive policy gate.

The interactive console gate lives in ui.py.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Callable, List, Sequence, Tuple, Union

from models import Artifact

Decision = Union[bool, Mapping[str, bool], Callable[[str, Sequence[Artifact]], bool]]


class ConfirmationGate:
    """Decides whether a section's discovered artifacts may be removed."""

    def confirm(self, section_name: str, items: Sequence[Artifact]) -> bool:
        raise NotImplementedError


def is_affirmative(answer: str, tokens: Sequence[str]) -> bool:
    """A single answer is a yes only if it is one of the accepted tokens."""
    if not answer:
        return False
    return answer.strip().lower() in {t.strip().lower() for t in tokens}


class PolicyGate(ConfirmationGate):
    """
    Answers from a fixed decision instead of asking anyone.

    The decision is a bool (same answer for every section), a mapping of
    section name to bool (missing sections are declined), or a callable
    taking (section_name, items). Every call is recorded in ``calls``.
    """

    def __init__(self, decision: Decision):
        self.decision = decision
        self.calls: List[Tuple[str, Tuple[Artifact, ...]]] = []

    def confirm(self, section_name: str, items: Sequence[Artifact]) -> bool:
        self.calls.append((section_name, tuple(items)))
        if isinstance(self.decision, bool):
            return self.decision
        if isinstance(self.decision, Mapping):
            return bool(self.decision.get(section_name, False))
        return bool(self.decision(section_name, items))
