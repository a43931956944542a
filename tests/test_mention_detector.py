"""
tests/test_mention_detector.py

Unit tests for mention classification. The detector is pure, so every test
is a plain input/output check.
"""

from __future__ import annotations

import pytest

from app.analysis.mention_detector import bare_name, detect_mention, extract_excerpt
from app.domain.mentions import MentionType


# ---------------------------------------------------------------------------
# Citation rule
# ---------------------------------------------------------------------------


class TestCitationMatch:
    def test_citation_on_target_domain_is_direct_citation(self) -> None:
        result = detect_mention(
            "Several guides cover this topic.",
            "https://example.com",
            "example.com",
            ["https://example.com/guide"],
        )

        assert result.mentioned is True
        assert result.mention_type == MentionType.DIRECT_CITATION
        assert result.confidence == 1.0
        assert result.citation_url == "https://example.com/guide"

    def test_subdomain_citation_matches(self) -> None:
        result = detect_mention("text", "https://example.com", "www.example.com", ["https://blog.example.com/post"])

        assert result.mention_type == MentionType.DIRECT_CITATION
        assert result.citation_url == "https://blog.example.com/post"

    def test_lookalike_domain_does_not_match(self) -> None:
        result = detect_mention("nothing here", "https://example.com", "example.com", ["https://notexample.com/"])

        assert result.mention_type == MentionType.NOT_MENTIONED

    def test_citation_choice_is_independent_of_input_order(self) -> None:
        citations = ["https://example.com/b", "https://example.com/a"]
        first = detect_mention("x", "https://example.com", "example.com", citations)
        second = detect_mention("x", "https://example.com", "example.com", list(reversed(citations)))

        assert first == second
        assert first.citation_url == "https://example.com/a"

    def test_excerpt_falls_back_to_bare_name(self) -> None:
        result = detect_mention(
            "Example is a solid agency for audits.",
            "https://example.com",
            "example.com",
            ["https://example.com/audits"],
        )

        assert result.excerpt == "Example is a solid agency for audits."


# ---------------------------------------------------------------------------
# Text rules
# ---------------------------------------------------------------------------


class TestTextMatch:
    def test_domain_in_text_without_cue_is_direct_citation(self) -> None:
        result = detect_mention("You can read more at example.com today.", "https://example.com", "example.com", [])

        assert result.mention_type == MentionType.DIRECT_CITATION
        assert result.confidence == 1.0
        assert result.citation_url is None
        assert "example.com" in (result.excerpt or "")

    def test_domain_near_cue_phrase_is_recommendation(self) -> None:
        result = detect_mention("I would recommend example.com for this.", "https://example.com", "example.com", [])

        assert result.mention_type == MentionType.RECOMMENDATION
        assert result.confidence == 1.0

    def test_brand_name_with_recommendation_cue(self) -> None:
        result = detect_mention(
            "For this kind of work we recommend AcmeWidgets for this.",
            "https://acmewidgets.com",
            "acmewidgets.com",
            [],
        )

        assert result.mentioned is True
        assert result.mention_type == MentionType.RECOMMENDATION
        assert result.confidence == 0.8

    def test_brand_name_without_cue_is_brand_mention(self) -> None:
        result = detect_mention("AcmeWidgets sells widgets.", "https://acmewidgets.com", "acmewidgets.com", [])

        assert result.mention_type == MentionType.BRAND_MENTION
        assert result.confidence == 0.8

    def test_brand_name_inside_another_word_is_rejected(self) -> None:
        result = detect_mention("The pixelranking method is popular.", "https://pixelrank.com", "pixelrank.com", [])

        assert result.mention_type == MentionType.NOT_MENTIONED

    def test_short_brand_name_is_skipped(self) -> None:
        result = detect_mention("Use abc for everything.", "https://abc.com", "abc.com", [])

        assert result.mention_type == MentionType.NOT_MENTIONED

    def test_no_reference_is_not_mentioned(self) -> None:
        result = detect_mention("Try a local provider.", "https://example.com", "example.com", [])

        assert result.mentioned is False
        assert result.mention_type == MentionType.NOT_MENTIONED
        assert result.confidence == 1.0
        assert result.excerpt is None
        assert result.citation_url is None


# ---------------------------------------------------------------------------
# Helpers and properties
# ---------------------------------------------------------------------------


class TestHelpers:
    @pytest.mark.parametrize(
        ("domain", "expected"),
        [
            ("pixelrank.com", "pixelrank"),
            ("www.acme.co.uk", "acme"),
            ("shop.acme.io", "acme"),
            ("brand.example", "brand"),
        ],
    )
    def test_bare_name(self, domain: str, expected: str) -> None:
        assert bare_name(domain) == expected

    def test_excerpt_is_ellipsized_on_truncated_sides(self) -> None:
        text = "a" * 150 + " target " + "b" * 150
        excerpt = extract_excerpt(text, "target")

        assert excerpt is not None
        assert excerpt.startswith("...")
        assert excerpt.endswith("...")
        assert "target" in excerpt

    def test_excerpt_without_truncation_has_no_ellipsis(self) -> None:
        assert extract_excerpt("short target text", "target") == "short target text"

    def test_mentioned_flag_agrees_with_type(self) -> None:
        samples = [
            ("see example.com", []),
            ("nothing", []),
            ("x", ["https://example.com"]),
            ("Example rocks", []),
        ]
        for text, citations in samples:
            result = detect_mention(text, "https://example.com", "example.com", citations)
            assert result.mentioned == (result.mention_type != MentionType.NOT_MENTIONED)
            assert 0.0 <= result.confidence <= 1.0

    def test_detector_is_pure(self) -> None:
        args = ("We suggest example.com here", "https://example.com", "example.com", frozenset({"https://x.org"}))
        assert detect_mention(*args) == detect_mention(*args)
