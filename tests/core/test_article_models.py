"""
Unit Tests for IssueMeta, ArticleCandidate, fragment and warning models.
"""

import pytest

from issue_toolkit.core.models import (
    ArticleCandidate,
    Fragment,
    FragmentKind,
    IssueMeta,
    PageRange,
    ReconcileWarning,
    SolutionGroup,
    WarningKind,
)


class TestIssueMeta:
    """Tests for IssueMeta dataclass."""

    def test_init_when_month_out_of_range_then_raises_error(self):
        with pytest.raises(ValueError, match="month must be 1-12"):
            IssueMeta(month=13, year=2025)

    def test_next_month_when_december_then_january(self):
        assert IssueMeta(month=12, year=2024).next_month == 1

    def test_next_month_when_april_then_may(self):
        assert IssueMeta(month=4, year=2025).next_month == 5


class TestArticleCandidate:
    """Tests for ArticleCandidate helpers."""

    def test_add_solution_ranges_when_called_then_updates_both_sets(self):
        """Solution ranges land in pages and solution_pages, sorted."""
        # Arrange
        article = ArticleCandidate("Test Your Play", pages=[PageRange(9, 9)])

        # Act
        article.add_solution_ranges([PageRange(72, 72)])

        # Assert
        assert article.pages == [PageRange(9, 9), PageRange(72, 72)]
        assert article.solution_pages == [PageRange(72, 72)]

    def test_content_page_set_when_solutions_present_then_excludes_them(self):
        article = ArticleCandidate(
            "Test Your Play",
            pages=[PageRange(7, 8), PageRange(72, 72)],
            solution_pages=[PageRange(72, 72)],
        )
        assert article.content_page_set() == {7, 8}

    def test_mark_interleaved_when_cleared_then_parent_removed(self):
        article = ArticleCandidate("Test Your Play")
        article.mark_interleaved("Swiss Teams")
        assert article.interleaved and article.parent_title == "Swiss Teams"

        article.clear_interleave()
        assert article.interleaved is False
        assert article.parent_title is None

    def test_title_key_when_mixed_case_then_lowercase(self):
        assert ArticleCandidate("  Test Your Play ").title_key == "test your play"

    def test_first_page_when_no_pages_then_none(self):
        assert ArticleCandidate("Empty").first_page is None


class TestFragmentModels:
    """Tests for Fragment and SolutionGroup."""

    def test_fragment_when_solution_group_kind_then_raises_error(self):
        with pytest.raises(ValueError, match="SolutionGroup"):
            Fragment(id="x", kind=FragmentKind.SOLUTION_GROUP)

    def test_text_when_not_text_fragment_then_empty(self):
        f = Fragment(id="h1", kind=FragmentKind.CARD_HAND_DIAGRAM, data={"text": "ignored"})
        assert f.text == ""
        assert f.is_text is False

    def test_solution_group_when_nested_then_raises_error(self):
        inner = SolutionGroup(id="sol-a", label="Solution A")
        with pytest.raises(ValueError, match="cannot contain"):
            SolutionGroup(id="sol-b", label="Solution B", fragments=(inner,))

    def test_solution_group_to_dict_when_serialized_then_blocks_nested(self):
        group = SolutionGroup(
            id="sol-a",
            label="Solution A",
            fragments=(Fragment.text_fragment("s1", "**Solution A** Duck."),),
        )
        d = group.to_dict()
        assert d["type"] == "solution_group"
        assert d["data"]["label"] == "Solution A"
        assert d["data"]["blocks"][0]["id"] == "s1"

    def test_with_text_when_called_then_original_unchanged(self):
        f = Fragment.text_fragment("t1", "old")
        g = f.with_text("new")
        assert f.text == "old"
        assert g.text == "new"
        assert g.id == "t1"


class TestReconcileWarning:
    """Tests for ReconcileWarning serialization."""

    def test_to_dict_when_round_tripped_then_equal(self):
        warning = ReconcileWarning(
            kind=WarningKind.UNRESOLVED_REFERENCE,
            title="Solutions",
            reason="no parent",
            pages=(80,),
            phase="merge",
        )
        assert ReconcileWarning.from_dict(warning.to_dict()) == warning

    def test_str_when_pages_present_then_listed(self):
        warning = ReconcileWarning(WarningKind.MALFORMED_INPUT, "A", "fixed", (3, 4))
        assert "pages 3, 4" in str(warning)
