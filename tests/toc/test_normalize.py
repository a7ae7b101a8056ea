"""
Unit Tests for entry normalization and the warning collector.
"""

import json

import pytest

from conftest import make_article, ranges
from issue_toolkit.core.models import WarningKind
from issue_toolkit.toc import WarningCollector, normalize_articles


class TestNormalizeArticles:
    """Tests for normalize_articles()."""

    def test_normalize_when_no_pages_then_whole_document(self):
        article = make_article("Editorial")
        collector = WarningCollector()

        normalize_articles([article], total_pages=12, collector=collector)

        assert ranges(article) == [[1, 12]]
        assert collector.count(WarningKind.MALFORMED_INPUT) == 1

    def test_normalize_when_range_past_end_then_clamped(self):
        article = make_article("Swiss Teams", [(9, 20)])

        normalize_articles([article], total_pages=12)

        assert ranges(article) == [[9, 12]]

    def test_normalize_when_unsorted_then_sorted(self):
        article = make_article("Test Your Play", [(72, 72), (9, 9)])

        normalize_articles([article], total_pages=80)

        assert ranges(article) == [[9, 9], [72, 72]]

    def test_normalize_when_solution_outside_pages_then_dropped(self):
        article = make_article("Test Your Play", [(9, 9), (72, 72)], [(72, 73)])

        normalize_articles([article], total_pages=80)

        assert [r.to_list() for r in article.solution_pages] == [[72, 72]]

    def test_normalize_when_parent_without_flag_then_cleared(self):
        article = make_article("Test Your Play", [(9, 9)], parent_title="Bidding Match")

        normalize_articles([article], total_pages=80)

        assert article.parent_title is None

    def test_normalize_when_total_pages_zero_then_raises_error(self):
        with pytest.raises(ValueError, match="total_pages"):
            normalize_articles([], total_pages=0)


class TestWarningCollector:
    """Tests for WarningCollector."""

    def test_for_title_when_several_articles_then_filtered(self):
        collector = WarningCollector()
        collector.add_unresolved_solutions("Solutions", [80])
        collector.add_fallback_parent("Test Your Play", "Swiss Teams", [30])

        assert len(collector.for_title("Test Your Play")) == 1
        assert collector.summary() == {"unresolved_reference": 1, "ambiguous_attribution": 1}

    def test_write_report_when_called_then_json_written(self, tmp_path):
        collector = WarningCollector()
        collector.add_missing_solution_page("Test Your Play", [9])
        path = tmp_path / "reports" / "warnings.json"

        collector.write_report(path)

        payload = json.loads(path.read_text())
        assert payload["summary"] == {"unresolved_reference": 1}
        assert payload["warnings"][0]["phase"] == "locate"
