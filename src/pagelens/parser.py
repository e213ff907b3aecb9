"""
Natural-language action parser.

Assistant replies are scanned with an ordered table of phrase patterns. Each
row captures its target in group 1; the word "all" in the matched phrase
makes the action a click-all.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Pattern, Sequence

from .exceptions import ActionParseError
from .models import Action, ActionKind

_OPEN_QUOTE = "[\"'“‘]"
_CLOSE_QUOTE = "[\"'”’]"
_QUOTED = rf"{_OPEN_QUOTE}([^\"'“”‘’]+){_CLOSE_QUOTE}"

_ALL_WORD = re.compile(r"\ball\b", re.IGNORECASE)
_QUOTE_PAIRS = {'"': '"', "'": "'", "“": "”", "‘": "’"}
_QUOTE_CHARS = "\"'“”‘’"


@dataclass(frozen=True)
class ActionPattern:
    """One row of the pattern table; group 1 captures the target."""
    name: str
    regex: Pattern[str]

    @classmethod
    def compile(cls, name: str, pattern: str) -> "ActionPattern":
        regex = re.compile(pattern, re.IGNORECASE)
        if regex.groups < 1:
            raise ActionParseError("Action pattern must capture the target in group 1", pattern_name=name)
        return cls(name=name, regex=regex)


DEFAULT_PATTERNS = (
    ActionPattern.compile("click", rf"\b(?:click|press|tap)(?:\s+on)?\s+(?:the\s+)?{_QUOTED}"),
    ActionPattern.compile("find", rf"\b(?:find|locate|look\s+for)\s+(?:the\s+)?{_QUOTED}"),
    ActionPattern.compile("click-all", r"\b(?:show|load|expand|click)\s+all\s+(.+?)(?=[.!?\n]|$)"),
)


def _strip_quotes(target: str) -> str:
    """Unwrap a target that is one quoted phrase."""
    if len(target) >= 2 and _QUOTE_PAIRS.get(target[0]) == target[-1]:
        inner = target[1:-1]
        if not any(q in inner for q in _QUOTE_CHARS):
            return inner.strip()
    return target


class ActionParser:
    """
    Extract actions from free text.

    Every pattern runs independently over the whole text; results are ordered
    by pattern, then by position. Nothing is de-duplicated, so a phrase that
    two patterns match yields two actions.
    """

    def __init__(self, patterns: Sequence[ActionPattern] = DEFAULT_PATTERNS):
        self.patterns = tuple(patterns)

    def parse(self, text: str) -> List[Action]:
        actions: List[Action] = []
        for pattern in self.patterns:
            actions.extend(self._apply(pattern, text))
        return actions

    def _apply(self, pattern: ActionPattern, text: str) -> Iterable[Action]:
        for match in pattern.regex.finditer(text):
            target = _strip_quotes(match.group(1).strip())
            if not target:
                continue
            phrase = match.group(0)
            kind = ActionKind.CLICK_ALL if _ALL_WORD.search(phrase) else ActionKind.CLICK
            yield Action(kind=kind, target=target, original_text=phrase.strip())


def parse_actions(text: str) -> List[Action]:
    """Parse with the default pattern table."""
    return ActionParser().parse(text)
