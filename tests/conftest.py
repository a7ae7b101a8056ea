import pytest
import sys
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import issue_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from issue_toolkit.core.models import ArticleCandidate, Fragment, FragmentKind, IssueMeta, PageRange


def make_article(title, pages=(), solution_pages=(), **kwargs):
    """Build an ArticleCandidate from [start, end] pairs."""
    return ArticleCandidate(
        title=title,
        pages=[PageRange(s, e) for s, e in pages],
        solution_pages=[PageRange(s, e) for s, e in solution_pages],
        **kwargs,
    )


def ranges(article):
    """Article pages as [[start, end], ...] for compact assertions."""
    return [r.to_list() for r in article.pages]


def text(id, body):
    return Fragment.text_fragment(id, body)


def hand(id):
    return Fragment(id=id, kind=FragmentKind.CARD_HAND_DIAGRAM, data={"hands": {}})


class FakePageSource:
    """In-memory PageSource: page text by number, one shared image."""

    def __init__(self, texts=None, total_pages=80):
        self.texts = texts or {}
        self.total_pages = total_pages
        self.image_requests = []

    def page_text(self, page):
        if not 1 <= page <= self.total_pages:
            return None
        return self.texts.get(page, "")

    def page_image(self, page):
        if not 1 <= page <= self.total_pages:
            return None
        self.image_requests.append(page)
        return Image.new("RGB", (20, 20), color="white")


# Common test fixtures
@pytest.fixture
def april_issue():
    """April issue metadata."""
    return IssueMeta(month=4, year=2025, volume=97, number=4, title="April 2025")


@pytest.fixture
def sample_image():
    """Create a simple test image."""
    return Image.new("RGB", (200, 100), color="white")


@pytest.fixture
def sample_toc_payload():
    """A small TOC payload in wire form."""
    return {
        "issue": {"month": 4, "year": 2025, "title": "April 2025"},
        "articles": [
            {"title": "Bidding Match", "author_name": "A. Writer", "category": "Bidding",
             "tags": ["auction"], "source_page": 3, "pdf_pages": [[3, 5]]},
            {"title": "Test Your Play", "source_page": 7, "pdf_pages": [[7, 8]]},
            {"title": "Test Your Play Solutions", "source_page": 72, "pdf_pages": [[72, 72]]},
            {"title": "Swiss Teams", "source_page": 9, "pdf_pages": [[9, 12]]},
        ],
    }
