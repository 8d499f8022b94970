"""
Item-Number Validator

Decides whether a token is an item number in a specification set's
numbering grammar. Tokens must match a registered pattern in full; there is
no "looks numeric" fallback, so malformed numbers are rejected rather than
guessed.
"""

import re
from typing import Iterable, Optional, Pattern, Sequence, Union

PatternLike = Union[str, Pattern]


def compile_patterns(patterns: Iterable[PatternLike]) -> tuple:
    """Compile pattern strings, leaving compiled patterns as they are."""
    return tuple(p if isinstance(p, re.Pattern) else re.compile(p) for p in patterns)


def is_valid_item_number(token: Optional[str], patterns: Sequence[Pattern]) -> bool:
    """True if the whole token matches at least one pattern."""
    if not token:
        return False
    return any(pattern.fullmatch(token) for pattern in patterns)


class ItemNumberValidator:
    """Item-number predicate bound to one pattern list."""

    def __init__(self, patterns: Iterable[PatternLike]):
        self.patterns = compile_patterns(patterns)

    def __call__(self, token: Optional[str]) -> bool:
        return is_valid_item_number(token, self.patterns)

    def __repr__(self):
        return f"ItemNumberValidator({[p.pattern for p in self.patterns]})"
