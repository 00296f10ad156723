"""Tests for the prefix-bucketed pattern index."""

from __future__ import annotations

import pytest

from tests.fakes import make_entry
from uacaps.core.exceptions import MissingDefaultPatternError
from uacaps.patterns.compiler import compile_pattern
from uacaps.patterns.index import GRAM_INDEX_MIN_SIZE, Bucket, PatternIndex, linear_query


def _compile(patterns: list[str]):
    return [
        compile_pattern(make_entry(p).model_copy(update={"ordinal": i}))
        for i, p in enumerate(patterns)
    ]


def _index(patterns: list[str]) -> PatternIndex:
    return PatternIndex.build(_compile(patterns))


class TestBuild:
    def test_missing_universal_pattern_rejected(self):
        with pytest.raises(MissingDefaultPatternError):
            _index(["iPhone*", "iPad*"])

    def test_default_is_universal_pattern(self):
        index = _index(["iPhone*", "*"])
        assert index.default.pattern == "*"

    def test_stats_describe_buckets(self):
        index = _index(["iPhone*", "iPhone 6*", "iPad*", "*Bot*", "*"])
        stats = index.stats()
        assert stats.patterns == 5
        assert stats.buckets == 3  # "iphone", "iphone 6", "ipad"
        assert stats.catch_all == 2
        assert len(index) == 5


class TestQuery:
    def test_most_specific_pattern_wins(self):
        index = _index(["iPhone*", "iPhone 6*", "*"])
        assert index.query("iPhone 6 Plus").pattern == "iPhone 6*"

    def test_specificity_beats_file_order(self):
        index = _index(["*", "iPhone*", "iPhone 6*"])
        assert index.query("iPhone 6 Plus").pattern == "iPhone 6*"

    def test_equal_specificity_earlier_entry_wins(self):
        first = _index(["*", "ab*", "*ab"])
        assert first.query("ab").pattern == "ab*"
        second = _index(["*", "*ab", "ab*"])
        assert second.query("ab").pattern == "*ab"

    def test_falls_back_to_universal(self):
        index = _index(["iPhone*", "*"])
        assert index.query("curl/8.0").pattern == "*"

    def test_case_insensitive_query(self):
        index = _index(["iPhone*", "*"])
        assert index.query("IPHONE").pattern == index.query("iphone").pattern == "iPhone*"

    def test_catch_all_pattern_can_win(self):
        index = _index(["Mozilla*", "*Googlebot/2.1*", "*"])
        assert index.query("Mozilla/5.0 (compatible; Googlebot/2.1)").pattern == "*Googlebot/2.1*"

    def test_bucket_key_must_be_input_prefix(self):
        index = _index(["Opera*", "*"])
        assert index.query("Mozilla Opera").pattern == "*"

    def test_pattern_longer_than_input_skipped(self):
        index = _index(["abc?", "*"])
        assert index.query("abc").pattern == "*"

    def test_candidates_prune_unrelated_buckets(self):
        index = _index(["iPhone*", "iPad*", "Android*", "*Bot*", "*"])
        patterns = {c.pattern for c in index.candidates("iPhone 15")}
        assert patterns == {"iPhone*", "*Bot*", "*"}

    def test_query_returns_none_when_nothing_matches(self):
        index = PatternIndex(buckets={}, catch_all=Bucket([]), default=_compile(["*"])[0])
        assert index.query("anything") is None


class TestAgreesWithLinearScan:
    PATTERNS = [
        "DefaultProperties",
        "Mozilla/5.0 (*",
        "Mozilla/5.0 (iPhone*",
        "Mozilla/5.0 (iPhone*CPU iPhone OS 17?4*",
        "Mozilla/5.0 (iPhone*CPU iPhone OS * like Mac OS X*)*Version/*Safari/*",
        "Mozilla/5.0 (iPad*",
        "Mozilla/5.0 (Windows NT 10.0*Win64? x64*)*Chrome/*",
        "Mozilla/5.0 (Windows NT ??.?*",
        "Mozilla/5.0 (Linux*Android*)*Chrome/*Mobile*",
        "Mozilla/5.0 (X11; Linux*Firefox/*",
        "*Googlebot*",
        "*bot*",
        "?url/*",
        "curl/*",
        "Opera/9.80*",
        "*",
    ]
    INPUTS = [
        "Mozilla/5.0 (iPhone; CPU iPhone OS 17_4 like Mac OS X) AppleWebKit/605.1.15 Version/17.4 Safari/604.1",
        "Mozilla/5.0 (iPhone; CPU iPhone OS 16_0 like Mac OS X) Version/16.0 Safari/604.1",
        "Mozilla/5.0 (iPad; CPU OS 16_6 like Mac OS X)",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 Chrome/124.0.0.0 Safari/537.36",
        "Mozilla/5.0 (Windows NT 11.0; rv:1)",
        "Mozilla/5.0 (Linux; Android 14; Pixel 8) Chrome/124.0 Mobile Safari/537.36",
        "Mozilla/5.0 (X11; Linux x86_64; rv:125.0) Gecko/20100101 Firefox/125.0",
        "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)",
        "curl/8.4.0",
        "wget robot",
        "Opera/9.80 (Windows NT 6.1)",
        "DefaultProperties",
        "x",
    ]

    @pytest.mark.parametrize("text", INPUTS)
    def test_indexed_query_matches_linear_scan(self, text):
        compiled = _compile(self.PATTERNS)
        index = PatternIndex.build(compiled)
        assert index.query(text) is linear_query(compiled, text)


def _crowded_patterns() -> list[str]:
    """Browscap-like shape: most patterns share one prefix, many start with '*'."""
    patterns = ["*", "Mozilla/5.0 (*", "Mozilla/5.0 (*Win64? x64*"]
    for version in range(40):
        patterns.append(f"Mozilla/5.0 (*Windows NT 10.0*Chrome/{version}.*Safari/*")
        patterns.append(f"Mozilla/5.0 (*Linux*Android*Chrome/{version}.*Mobile*")
        patterns.append(f"Mozilla/5.0 (*Macintosh*Version/{version}.*Safari/*")
        patterns.append(f"*Firefox/{version}.0*")
        patterns.append(f"*bot/{version}.?*")
    return patterns


class TestGramIndexedBuckets:
    INPUTS = [
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 Chrome/12.0.0 Safari/537.36",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) Chrome/124.0 Safari/1",
        "Mozilla/5.0 (Linux; Android 14) Chrome/7.0 Mobile Safari/537.36",
        "Mozilla/5.0 (Macintosh; Intel Mac OS X) Version/17.4 Safari/605.1",
        "Mozilla/5.0 (X11; rv:33.0) Gecko Firefox/33.0",
        "Mozilla/5.0 (compatible; Googlebot/2.1)",
        "Mozilla/5.0 (compatible; bingbot/3.9x)",
        "Mozilla/5.0 (Windows NT 6.1)",
        "Mozilla/5.0 (",
        "curl/8.4.0",
    ]

    @pytest.fixture(scope="class")
    def compiled(self):
        return _compile(_crowded_patterns())

    def test_large_buckets_are_gram_indexed(self, compiled):
        stats = PatternIndex.build(compiled).stats()
        assert stats.largest_bucket >= GRAM_INDEX_MIN_SIZE
        assert stats.catch_all >= GRAM_INDEX_MIN_SIZE
        assert stats.gram_indexed_buckets == 2
        assert stats.largest_posting < stats.largest_bucket

    @pytest.mark.parametrize("text", INPUTS)
    def test_indexed_query_matches_linear_scan(self, compiled, text):
        index = PatternIndex.build(compiled)
        assert index.query(text) is linear_query(compiled, text)

    def test_candidates_skip_patterns_without_shared_slice(self, compiled):
        index = PatternIndex.build(compiled)
        patterns = {c.pattern for c in index.candidates(self.INPUTS[2])}
        assert "Mozilla/5.0 (*Linux*Android*Chrome/7.*Mobile*" in patterns
        assert "Mozilla/5.0 (*Macintosh*Version/7.*Safari/*" not in patterns
        assert "*Firefox/33.0*" not in patterns
        assert len(patterns) < len(compiled) // 2

    def test_short_literal_patterns_always_considered(self, compiled):
        index = PatternIndex.build(compiled)
        patterns = {c.pattern for c in index.candidates("Mozilla/5.0 (")}
        assert {"Mozilla/5.0 (*", "*"} <= patterns
