"""
Unit Tests for title cleanup: author credits and near-duplicate merging.
"""

from conftest import make_article, ranges
from issue_toolkit.toc import deduplicate_articles, strip_author_from_title, strip_author_titles


class TestStripAuthorFromTitle:
    """Tests for strip_author_from_title()."""

    def test_strip_when_conducted_by_then_split(self):
        assert strip_author_from_title("Test Your Play conducted by Jeff Rubens") == (
            "Test Your Play", "Jeff Rubens",
        )

    def test_strip_when_plain_by_then_split(self):
        assert strip_author_from_title("Bidding Match by A. Writer") == ("Bidding Match", "A. Writer")

    def test_strip_when_no_credit_then_unchanged(self):
        assert strip_author_from_title("Swiss Teams") == ("Swiss Teams", None)

    def test_strip_when_remaining_title_too_short_then_unchanged(self):
        assert strip_author_from_title("By Jeff Rubens") == ("By Jeff Rubens", None)

    def test_strip_when_known_author_disagrees_then_unchanged(self):
        title = "Stand by Your Partner"
        assert strip_author_from_title(title, known_author="Someone Else") == (title, None)


class TestStripAuthorTitles:
    """Tests for strip_author_titles()."""

    def test_strip_titles_when_author_empty_then_filled(self):
        article = make_article("Test Your Play conducted by Jeff Rubens", [(9, 9)])

        changed = strip_author_titles([article])

        assert changed == 1
        assert article.title == "Test Your Play"
        assert article.author_name == "Jeff Rubens"

    def test_strip_titles_when_author_known_then_kept(self):
        article = make_article("Letters by J. Rubens", [(2, 2)], author_name="Jeff Rubens (J. Rubens)")

        strip_author_titles([article])

        assert article.title == "Letters"
        assert article.author_name == "Jeff Rubens (J. Rubens)"


class TestDeduplicateArticles:
    """Tests for deduplicate_articles()."""

    def test_dedupe_when_title_contained_then_larger_kept(self):
        # Arrange
        long = make_article("Master Solvers Club", [(20, 25)], category="Bidding")
        short = make_article("The Master Solvers Club", [(26, 26)], category="Bidding")

        # Act
        kept = deduplicate_articles([short, long])

        # Assert
        assert [a.title for a in kept] == ["Master Solvers Club"]
        assert ranges(kept[0]) == [[20, 25], [26, 26]]

    def test_dedupe_when_categories_differ_then_both_kept(self):
        a = make_article("Swiss Teams", [(9, 12)], category="Tournament")
        b = make_article("Swiss Teams", [(40, 41)], category="Letters")

        assert len(deduplicate_articles([a, b])) == 2

    def test_dedupe_when_many_words_differ_then_both_kept(self):
        a = make_article("Bidding Theory for Experts", [(3, 5)])
        b = make_article("Defensive Signals in Practice", [(6, 8)])

        assert len(deduplicate_articles([a, b])) == 2

    def test_dedupe_when_solutions_present_then_merged(self):
        a = make_article("New Critical Moments", [(30, 33)])
        b = make_article("New Critical Moments!", [(70, 70)], [(70, 70)])

        kept = deduplicate_articles([a, b])

        assert len(kept) == 1
        assert [r.to_list() for r in kept[0].solution_pages] == [[70, 70]]
