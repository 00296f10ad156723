"""Pattern compiler: turns an Entry's wildcard pattern into a CompiledPattern.

A pattern is split into literal runs and wildcard tokens (``*`` and ``?``).
For matching, the token stream is further cut at every ``*`` into blocks of
literals and ``?``; the first block is anchored at the start of the input, the
last at the end, and the blocks in between are placed leftmost-first. That
placement is optimal for ``*``-separated globs, so no backtracking is needed.

Matching is case-insensitive: literal runs are stored lower-cased and callers
pass inputs through ``normalize``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from functools import lru_cache

from uacaps.core.exceptions import InvalidPatternError
from uacaps.models.entry import Entry

STAR = "*"
QUESTION = "?"

# Specificity weights: a literal character is worth 2, a '?' costs 1 and a
# '*' costs 2, so '?' (exactly one character) ranks above '*' (any run).
LITERAL_WEIGHT = 2
QUESTION_PENALTY = 1
STAR_PENALTY = 2

Block = tuple[str, ...]

_TOKEN_RE = re.compile(r"\*+|\?|[^*?]+")


def normalize(text: str) -> str:
    """Case-normalize a pattern or input string for matching.

    Characters are lower-cased one at a time and kept as-is when their lower
    case form is longer than one character, so the result always has the
    same length as ``text``.
    """
    if text.isascii():
        return text.lower()
    return "".join(map(_lower_char, text))


@lru_cache(maxsize=4096)
def _lower_char(ch: str) -> str:
    lowered = ch.lower()
    return lowered if len(lowered) == 1 else ch


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """Immutable matchable form of one dataset pattern."""

    pattern: str
    slot: int  # position of the owning Entry in the source dataset
    tokens: tuple[str, ...]
    specificity: int
    rank: tuple[int, int]  # sort key, best candidate first
    prefix: str  # leading literal run, "" when the pattern starts with a wildcard
    anchor: str  # longest literal run after the prefix, must occur in any matching input
    literals: tuple[str, ...]  # literal runs after the prefix
    min_length: int
    has_star: bool
    head: Block
    head_length: int
    tail: Block
    tail_length: int
    middle: tuple[tuple[Block, int], ...]

    @property
    def is_universal(self) -> bool:
        """True when the pattern matches every string (only '*')."""
        return self.tokens == (STAR,)

    def matches(self, text: str) -> bool:
        """Anchored wildcard match against an already-normalized input."""
        n = len(text)
        if not self.has_star:
            return n == self.min_length and _block_at(self.head, text, 0)
        if n < self.min_length:
            return False
        if not _block_at(self.head, text, 0):
            return False
        end = n - self.tail_length
        if not _block_at(self.tail, text, end):
            return False
        pos = self.head_length
        for block, length in self.middle:
            found = _find_block(block, text, pos, end - length)
            if found < 0:
                return False
            pos = found + length
        return True


def tokenize(pattern: str) -> tuple[str, ...]:
    """Split a pattern into lower-cased literal runs and wildcard tokens.

    Adjacent '*' tokens collapse into one since they match the same strings.
    """
    return tuple(
        STAR if token[0] == STAR else token
        for token in _TOKEN_RE.findall(normalize(pattern))
    )


def specificity(tokens: Iterable[str]) -> int:
    """Score how narrowly a token sequence constrains matching strings."""
    score = 0
    for token in tokens:
        if token == STAR:
            score -= STAR_PENALTY
        elif token == QUESTION:
            score -= QUESTION_PENALTY
        else:
            score += LITERAL_WEIGHT * len(token)
    return score


def compile_pattern(entry: Entry) -> CompiledPattern:
    """Compile an entry's pattern.

    Raises:
        InvalidPatternError: the pattern is empty after trimming.
    """
    if not entry.pattern.strip():
        raise InvalidPatternError(entry.pattern)

    tokens = tokenize(entry.pattern)
    blocks: list[list[str]] = [[]]
    for token in tokens:
        if token == STAR:
            blocks.append([])
        elif token == QUESTION:
            blocks[-1].append(QUESTION)
        else:
            blocks[-1].append(token)

    lengths = [_block_length(block) for block in blocks]
    prefix = tokens[0] if tokens[0] not in (STAR, QUESTION) else ""
    literals = tuple(t for t in tokens[1 if prefix else 0:] if t not in (STAR, QUESTION))
    score = specificity(tokens)
    has_star = len(blocks) > 1
    head = tuple(blocks[0])
    tail = tuple(blocks[-1]) if has_star else ()

    return CompiledPattern(
        pattern=entry.pattern,
        slot=entry.ordinal,
        tokens=tokens,
        specificity=score,
        rank=(-score, entry.ordinal),
        prefix=prefix,
        anchor=max(literals, key=len, default=""),
        literals=literals,
        min_length=sum(lengths),
        has_star=has_star,
        head=head,
        head_length=lengths[0],
        tail=tail,
        tail_length=lengths[-1] if has_star else 0,
        middle=tuple((tuple(b), n) for b, n in zip(blocks[1:-1], lengths[1:-1])),
    )


def compile_all(entries: Iterable[Entry]) -> list[CompiledPattern]:
    """Compile every entry, failing on the first invalid pattern."""
    return [compile_pattern(entry) for entry in entries]


def _block_length(block: Iterable[str]) -> int:
    return sum(1 if item == QUESTION else len(item) for item in block)


def _block_at(block: Block, text: str, pos: int) -> bool:
    for item in block:
        if item == QUESTION:
            if pos >= len(text):
                return False
            pos += 1
        elif text.startswith(item, pos):
            pos += len(item)
        else:
            return False
    return True


def _find_block(block: Block, text: str, start: int, last: int) -> int:
    """Leftmost position in [start, last] where ``block`` matches, or -1."""
    if last < start:
        return -1
    first = block[0]
    if first == QUESTION:
        for pos in range(start, last + 1):
            if _block_at(block, text, pos):
                return pos
        return -1
    pos = text.find(first, start, last + len(first))
    while pos != -1:
        if _block_at(block, text, pos):
            return pos
        pos = text.find(first, pos + 1, last + len(first))
    return -1
