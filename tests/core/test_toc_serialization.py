"""
Unit Tests for TOC and fragment serialization.
"""

import json

import pytest

from issue_toolkit.core.models import FragmentKind, PageRange, SolutionGroup, WarningKind
from issue_toolkit.core.schemas import ValidationError
from issue_toolkit.core.utils import (
    article_from_dict,
    article_to_dict,
    deserialize_toc,
    fragment_from_dict,
    fragments_to_list,
    load_toc_json,
    parse_page_ranges,
    save_toc_json,
    serialize_toc,
)
from issue_toolkit.toc import WarningCollector


class TestParsePageRanges:
    """Tests for parse_page_ranges() legacy shapes."""

    def test_parse_when_list_of_pairs_then_sorted_ranges(self):
        assert parse_page_ranges([[72, 72], [9, 9]]) == [PageRange(9, 9), PageRange(72, 72)]

    def test_parse_when_flat_pair_then_single_range(self):
        assert parse_page_ranges([3, 5]) == [PageRange(3, 5)]

    def test_parse_when_bare_int_then_single_page(self):
        assert parse_page_ranges(12) == [PageRange(12, 12)]

    def test_parse_when_none_then_empty(self):
        assert parse_page_ranges(None) == []

    def test_parse_when_inverted_then_repaired_with_warning(self):
        # Arrange
        collector = WarningCollector()

        # Act
        result = parse_page_ranges([9, 4], title="Swiss Teams", total_pages=80, collector=collector)

        # Assert
        assert result == [PageRange(9, 9)]
        assert collector.count(WarningKind.MALFORMED_INPUT) == 1

    def test_parse_when_past_total_pages_then_clamped(self):
        assert parse_page_ranges([[78, 90]], total_pages=80) == [PageRange(78, 80)]

    def test_parse_when_start_zero_without_total_then_raised_to_one(self):
        assert parse_page_ranges([[0, 3]]) == [PageRange(1, 3)]

    def test_parse_when_garbage_then_dropped(self):
        collector = WarningCollector()
        assert parse_page_ranges([["a", 3]], title="X", collector=collector) == []
        assert collector.count() == 1


class TestArticleSerialization:
    """Tests for article_from_dict() / article_to_dict()."""

    def test_from_dict_when_only_source_page_then_single_page(self):
        article = article_from_dict({"title": "Letters", "source_page": 12})
        assert article.pages == [PageRange(12, 12)]

    def test_from_dict_when_parent_without_interleaved_then_parent_dropped(self):
        article = article_from_dict({"title": "Test Your Play", "pdf_pages": [[7, 7]], "parent_article": "X"})
        assert article.parent_title is None

    def test_to_dict_when_interleaved_then_wire_names_used(self):
        article = article_from_dict({
            "title": "Test Your Play",
            "pdf_pages": [[7, 7], [72, 72]],
            "solution_page_ranges": [[72, 72]],
            "interleaved": True,
            "parent_article": "Bidding Match",
        })
        d = article_to_dict(article)
        assert d["pdf_pages"] == [[7, 7], [72, 72]]
        assert d["solution_page_ranges"] == [[72, 72]]
        assert d["interleaved"] is True
        assert d["parent_article"] == "Bidding Match"


class TestTocPayload:
    """Tests for deserialize_toc() / serialize_toc() and file helpers."""

    def test_deserialize_when_valid_payload_then_issue_and_articles(self, sample_toc_payload):
        issue, articles = deserialize_toc(sample_toc_payload)
        assert issue.month == 4
        assert [a.title for a in articles][:2] == ["Bidding Match", "Test Your Play"]
        assert articles[0].tags == ["auction"]

    def test_deserialize_when_missing_issue_then_raises_validation_error(self):
        with pytest.raises(ValidationError, match="Missing required fields"):
            deserialize_toc({"articles": []})

    def test_save_and_load_when_file_written_then_pages_preserved(self, tmp_path, sample_toc_payload):
        issue, articles = deserialize_toc(sample_toc_payload)
        path = tmp_path / "out" / "toc.json"

        save_toc_json(path, issue, articles, total_pages=80)
        loaded_issue, loaded = load_toc_json(path)

        assert loaded_issue == issue
        assert [a.pages for a in loaded] == [a.pages for a in articles]
        assert json.loads(path.read_text())["total_pages"] == 80

    def test_load_when_invalid_json_then_raises_validation_error(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ValidationError, match="Invalid JSON"):
            load_toc_json(path)

    def test_serialize_when_called_then_schema_version_set(self, sample_toc_payload):
        issue, articles = deserialize_toc(sample_toc_payload)
        assert serialize_toc(issue, articles)["schema_version"] == 1


class TestFragmentSerialization:
    """Tests for fragment_from_dict() type aliases."""

    @pytest.mark.parametrize("type_name,kind", [
        ("bridgeHand", FragmentKind.CARD_HAND_DIAGRAM),
        ("playHand", FragmentKind.CARD_HAND_DIAGRAM),
        ("biddingTable", FragmentKind.AUCTION_TABLE),
        ("text", FragmentKind.TEXT),
        ("video", FragmentKind.VIDEO),
    ])
    def test_from_dict_when_type_alias_then_mapped(self, type_name, kind):
        assert fragment_from_dict({"id": "b1", "type": type_name, "data": {}}).kind is kind

    def test_from_dict_when_solution_then_group_with_blocks(self):
        group = fragment_from_dict({
            "id": "sol-a",
            "type": "solution",
            "data": {"label": "Solution A", "blocks": [{"id": "s1", "type": "text", "data": {"text": "x"}}]},
        })
        assert isinstance(group, SolutionGroup)
        assert group.fragments[0].text == "x"
        assert fragments_to_list([group])[0]["type"] == "solution_group"

    def test_from_dict_when_unknown_type_then_raises_error(self):
        with pytest.raises(ValueError, match="Unknown fragment type"):
            fragment_from_dict({"id": "b1", "type": "hologram"})
