"""
Unit Tests for the solution-page locator.
"""

import pytest

from conftest import FakePageSource, make_article, ranges
from issue_toolkit.core.models import WarningKind
from issue_toolkit.toc import WarningCollector, find_solution_reference, locate_solution_pages


class TestFindSolutionReference:
    """Tests for find_solution_reference()."""

    @pytest.mark.parametrize("text,expected", [
        ("Solutions on page 73", 73),
        ("Answer page 74", 74),
        ("(Solution page 75.)", 75),
        ("See page 76 for details", 76),
        ("Turn to page 77 for the solution", 77),
    ])
    def test_find_when_reference_present_then_page_returned(self, text, expected):
        assert find_solution_reference(text, total_pages=80) == expected

    def test_find_when_page_beyond_document_then_none(self):
        assert find_solution_reference("Solution on page 99", total_pages=80) is None

    def test_find_when_own_page_then_skipped(self):
        assert find_solution_reference("Solutions on page 9", 80, exclude={9}) is None

    @pytest.mark.parametrize("text", [
        "The resolution on page 5 of the rules applies here.",
        "Oversee page 12 layout",
    ])
    def test_find_when_keyword_inside_longer_word_then_none(self, text):
        assert find_solution_reference(text, total_pages=80) is None

    def test_find_when_empty_text_then_none(self):
        assert find_solution_reference("", 80) is None


class TestLocateSolutionPages:
    """Tests for locate_solution_pages()."""

    # ─────────────────────────────────────────────────────────────────────────
    # Text Scan
    # ─────────────────────────────────────────────────────────────────────────

    def test_locate_when_reference_in_text_then_page_added(self):
        # Arrange
        typ = make_article("Test Your Play", [(9, 9)])
        source = FakePageSource({9: "South plays... (Solution on page 73.)"})

        # Act
        outcomes = locate_solution_pages([typ], 80, source)

        # Assert
        assert ranges(typ) == [[9, 9], [73, 73]]
        assert [r.to_list() for r in typ.solution_pages] == [[73, 73]]
        assert outcomes[0].method == "text"
        assert source.image_requests == []

    def test_locate_when_located_page_inside_other_article_then_released(self):
        """The page is clipped from the article whose expansion absorbed it."""
        swiss = make_article("Swiss Teams", [(9, 80)])
        iyd = make_article("Improve Your Defense", [(20, 20)])
        source = FakePageSource({20: "Solutions on page 75"})

        locate_solution_pages([swiss, iyd], 80, source)

        assert ranges(swiss) == [[9, 74], [76, 80]]
        assert ranges(iyd) == [[20, 20], [75, 75]]

    def test_locate_when_has_solutions_then_skipped(self):
        typ = make_article("Test Your Play", [(9, 9), (72, 72)], [(72, 72)])
        source = FakePageSource({9: "Solution on page 73"})

        outcomes = locate_solution_pages([typ], 80, source)

        assert outcomes == []
        assert ranges(typ) == [[9, 9], [72, 72]]

    def test_locate_when_not_problem_article_then_skipped(self):
        letters = make_article("Letters", [(9, 9)])
        source = FakePageSource({9: "Solution on page 73"})

        assert locate_solution_pages([letters], 80, source) == []

    def test_locate_when_no_page_source_then_phase_skipped(self):
        typ = make_article("Test Your Play", [(9, 9)])

        assert locate_solution_pages([typ], 80, None) == []

    # ─────────────────────────────────────────────────────────────────────────
    # Reader Fallback
    # ─────────────────────────────────────────────────────────────────────────

    def test_locate_when_text_has_nothing_then_reader_used(self):
        # Arrange
        typ = make_article("Test Your Play", [(9, 10)])
        source = FakePageSource()
        calls = []

        def reader(image, title):
            calls.append(title)
            return 74

        # Act
        outcomes = locate_solution_pages([typ], 80, source, reader=reader)

        # Assert
        assert calls == ["Test Your Play"]
        assert source.image_requests == [9]
        assert outcomes[0].method == "reader"
        assert ranges(typ) == [[9, 10], [74, 74]]

    @pytest.mark.parametrize("answer", [None, 0, 81, 10, "74"])
    def test_locate_when_reader_answer_unusable_then_warning(self, answer):
        typ = make_article("Test Your Play", [(9, 10)])
        collector = WarningCollector()

        outcomes = locate_solution_pages(
            [typ], 80, FakePageSource(), reader=lambda image, title: answer, collector=collector,
        )

        assert outcomes[0].found is False
        assert typ.solution_pages == []
        assert collector.count(WarningKind.UNRESOLVED_REFERENCE) == 1

    def test_locate_when_reader_raises_then_treated_as_not_found(self):
        typ = make_article("Test Your Play", [(9, 9)])

        def reader(image, title):
            raise RuntimeError("service unavailable")

        outcomes = locate_solution_pages([typ], 80, FakePageSource(), reader=reader)

        assert outcomes[0].found is False
