"""Pattern index: prefix-bucketed candidate lookup over compiled patterns.

Patterns are grouped by their leading literal run (lower-cased). An input only
consults buckets whose key is a prefix of the input, one dict probe per
distinct key length; patterns that start with a wildcard sit in a catch-all
bucket that is consulted last.

Browscap-shaped data piles most patterns into a few buckets (everything under
``mozilla/5.0 (``) and the catch-all. Buckets above ``GRAM_INDEX_MIN_SIZE``
are indexed a second time: each pattern is filed under one ``GRAM``-character
slice of a literal run after its prefix, the slice shared by the fewest
patterns in that bucket. A pattern can only match inputs that contain its
slice, so a query only walks the postings of slices found in the input, plus
the patterns too short to have a slice.

Every bucket yields candidates best-first (highest specificity, then earliest
entry), so a scan stops at the first match, or as soon as the remaining
candidates cannot beat the best match found in an earlier bucket.
"""

from __future__ import annotations

import heapq
import logging
from collections import Counter, defaultdict
from collections.abc import Iterable, Iterator, Sequence
from operator import attrgetter

from pydantic import BaseModel

from uacaps.core.exceptions import MissingDefaultPatternError
from uacaps.patterns.compiler import CompiledPattern, normalize

logger = logging.getLogger(__name__)

GRAM = 4
GRAM_INDEX_MIN_SIZE = 64

_rank = attrgetter("rank")


class IndexStats(BaseModel):
    """Shape of a built index, for logs and readiness probes."""

    patterns: int
    buckets: int
    largest_bucket: int
    catch_all: int
    key_lengths: int
    gram_indexed_buckets: int = 0
    largest_posting: int = 0

    model_config = {"frozen": True}


class Bucket:
    """Rank-ordered patterns sharing one prefix, optionally gram-indexed."""

    __slots__ = ("patterns", "postings", "unkeyed")

    def __init__(self, patterns: Iterable[CompiledPattern]) -> None:
        self.patterns: tuple[CompiledPattern, ...] = tuple(sorted(patterns, key=_rank))
        self.postings: dict[str, tuple[CompiledPattern, ...]] = {}
        self.unkeyed: tuple[CompiledPattern, ...] = self.patterns
        if len(self.patterns) >= GRAM_INDEX_MIN_SIZE:
            self._index_grams()

    def __len__(self) -> int:
        return len(self.patterns)

    def __iter__(self) -> Iterator[CompiledPattern]:
        return iter(self.patterns)

    @property
    def indexed(self) -> bool:
        return bool(self.postings)

    def ordered(self, grams: set[str]) -> Iterable[CompiledPattern]:
        """Candidates for an input with the given gram set, best first."""
        if not self.postings:
            return self.patterns
        lists = [self.postings[gram] for gram in grams if gram in self.postings]
        if not lists:
            return self.unkeyed
        lists.append(self.unkeyed)
        return heapq.merge(*lists, key=_rank)

    def _index_grams(self) -> None:
        grams_of = [_pattern_grams(compiled) for compiled in self.patterns]
        frequency: Counter[str] = Counter()
        for grams in grams_of:
            frequency.update(grams)

        postings: dict[str, list[CompiledPattern]] = defaultdict(list)
        unkeyed: list[CompiledPattern] = []
        # self.patterns is rank-ordered, so every posting list is too.
        for compiled, grams in zip(self.patterns, grams_of):
            if grams:
                postings[min(grams, key=lambda g: (frequency[g], g))].append(compiled)
            else:
                unkeyed.append(compiled)
        self.postings = {gram: tuple(group) for gram, group in postings.items()}
        self.unkeyed = tuple(unkeyed)


class PatternIndex:
    """Immutable prefix index. Build once with ``PatternIndex.build``."""

    def __init__(
        self,
        buckets: dict[str, Bucket],
        catch_all: Bucket,
        default: CompiledPattern,
    ) -> None:
        self._buckets = buckets
        self._catch_all = catch_all
        self._default = default
        self._key_lengths = tuple(sorted({len(key) for key in buckets}, reverse=True))
        self._size = sum(len(b) for b in buckets.values()) + len(catch_all)
        self._gram_indexed = catch_all.indexed or any(b.indexed for b in buckets.values())

    @classmethod
    def build(cls, patterns: Iterable[CompiledPattern]) -> PatternIndex:
        """Group compiled patterns into prefix buckets.

        Raises:
            MissingDefaultPatternError: no universal ``*`` pattern is present.
        """
        grouped: dict[str, list[CompiledPattern]] = defaultdict(list)
        catch_all: list[CompiledPattern] = []
        default: CompiledPattern | None = None

        for compiled in patterns:
            if compiled.prefix:
                grouped[compiled.prefix].append(compiled)
            else:
                catch_all.append(compiled)
            if compiled.is_universal and (default is None or compiled.rank < default.rank):
                default = compiled

        if default is None:
            raise MissingDefaultPatternError(
                "Dataset has no universal '*' pattern to fall back on"
            )

        index = cls(
            buckets={key: Bucket(group) for key, group in grouped.items()},
            catch_all=Bucket(catch_all),
            default=default,
        )
        stats = index.stats()
        logger.info(
            "Built pattern index: %d patterns in %d buckets (largest %d, catch-all %d, "
            "%d gram-indexed, largest posting %d)",
            stats.patterns, stats.buckets, stats.largest_bucket, stats.catch_all,
            stats.gram_indexed_buckets, stats.largest_posting,
        )
        return index

    def __len__(self) -> int:
        return self._size

    @property
    def default(self) -> CompiledPattern:
        """The universal fallback pattern."""
        return self._default

    def query(self, text: str) -> CompiledPattern | None:
        """Best matching pattern for ``text``, or None when nothing matches."""
        normalized = normalize(text)
        grams = _text_grams(normalized) if self._gram_indexed else set()
        best: CompiledPattern | None = None
        for bucket in self._buckets_for(normalized):
            best = _best_in(bucket.ordered(grams), normalized, best)
        return best

    def candidates(self, text: str) -> Iterator[CompiledPattern]:
        """Every pattern the pruning steps leave for ``text``, best-first per bucket."""
        normalized = normalize(text)
        grams = _text_grams(normalized)
        for bucket in self._buckets_for(normalized):
            yield from bucket.ordered(grams)

    def stats(self) -> IndexStats:
        buckets = [*self._buckets.values(), self._catch_all]
        return IndexStats(
            patterns=self._size,
            buckets=len(self._buckets),
            largest_bucket=max((len(b) for b in self._buckets.values()), default=0),
            catch_all=len(self._catch_all),
            key_lengths=len(self._key_lengths),
            gram_indexed_buckets=sum(1 for b in buckets if b.indexed),
            largest_posting=max(
                (len(p) for b in buckets for p in (*b.postings.values(), b.unkeyed) if b.indexed),
                default=0,
            ),
        )

    def _buckets_for(self, normalized: str) -> Iterator[Bucket]:
        n = len(normalized)
        for length in self._key_lengths:
            if length > n:
                continue
            bucket = self._buckets.get(normalized[:length])
            if bucket is not None:
                yield bucket
        yield self._catch_all


def linear_query(patterns: Sequence[CompiledPattern], text: str) -> CompiledPattern | None:
    """Try every pattern against ``text``. Reference behaviour for PatternIndex.query."""
    normalized = normalize(text)
    best: CompiledPattern | None = None
    for compiled in patterns:
        if compiled.matches(normalized) and (best is None or compiled.rank < best.rank):
            best = compiled
    return best


def _pattern_grams(compiled: CompiledPattern) -> set[str]:
    return {
        literal[i:i + GRAM]
        for literal in compiled.literals
        for i in range(len(literal) - GRAM + 1)
    }


def _text_grams(text: str) -> set[str]:
    return {text[i:i + GRAM] for i in range(len(text) - GRAM + 1)}


def _best_in(
    candidates: Iterable[CompiledPattern], text: str, best: CompiledPattern | None,
) -> CompiledPattern | None:
    n = len(text)
    for compiled in candidates:
        if best is not None and compiled.rank > best.rank:
            break
        if compiled.min_length > n:
            continue
        if not compiled.has_star and compiled.min_length != n:
            continue
        if compiled.anchor and compiled.anchor not in text:
            continue
        if compiled.matches(text):
            return compiled
    return best
