"""
Unit Tests for issue-wide fragment processing.
"""

import threading

import pytest

from conftest import text
from issue_toolkit.fragments import process_article_fragments, process_issue_fragments


@pytest.fixture
def issue_fragments():
    """Two articles: one grouped problem set, one plain article."""
    return {
        "Test Your Play": [
            text("pa", "**Problem A** South holds"),
            text("pb", "**Problem B** North opens"),
            text("sa", "**Solution A** Win the ace. (Solution on page 73.)"),
            text("sb", "**Solution B** Pass"),
        ],
        "Letters": [text("l1", "Dear Editor,"), text("ad", "Back issues available")],
    }


class TestProcessArticleFragments:
    """Tests for process_article_fragments()."""

    def test_process_when_called_then_cleanup_before_interleave(self, issue_fragments):
        result = process_article_fragments("Test Your Play", issue_fragments["Test Your Play"])

        assert [f.id for f in result.fragments] == ["pa", "sol-a", "pb", "sol-b"]
        assert result.cleanup.cross_references == 1
        assert result.fragments[1].fragments[0].text == "**Solution A** Win the ace."


class TestProcessIssueFragments:
    """Tests for process_issue_fragments()."""

    def test_process_when_all_articles_then_each_result_keyed_by_title(self, issue_fragments):
        # Act
        outcome = process_issue_fragments(issue_fragments, issue_month=4, max_workers=2)

        # Assert
        assert outcome.complete is True
        assert set(outcome.articles) == {"Test Your Play", "Letters"}
        assert outcome.articles["Test Your Play"].interleave.reordered is True
        assert [f.id for f in outcome.articles["Letters"].fragments] == ["l1"]

    def test_process_when_cancelled_before_start_then_all_skipped(self, issue_fragments):
        cancel = threading.Event()
        cancel.set()

        outcome = process_issue_fragments(issue_fragments, cancel_event=cancel)

        assert outcome.articles == {}
        assert sorted(outcome.cancelled) == ["Letters", "Test Your Play"]
        assert outcome.complete is False

    def test_process_when_article_fails_then_recorded_and_others_kept(self, issue_fragments):
        issue_fragments["Broken"] = [object()]

        outcome = process_issue_fragments(issue_fragments)

        assert "Broken" in outcome.failed
        assert "Letters" in outcome.articles

    def test_process_when_workers_invalid_then_raises_error(self):
        with pytest.raises(ValueError, match="max_workers"):
            process_issue_fragments({}, max_workers=0)
