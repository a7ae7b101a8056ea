"""
Utils Package

Serialization and utility functions.
"""

from .serialization import (
    article_from_dict,
    article_to_dict,
    deserialize_toc,
    serialize_toc,
    load_toc_json,
    save_toc_json,
    parse_page_ranges,
    fragment_from_dict,
    fragments_from_list,
    fragments_to_list,
    page_fragments_from_list,
)

__all__ = [
    "article_from_dict",
    "article_to_dict",
    "deserialize_toc",
    "serialize_toc",
    "load_toc_json",
    "save_toc_json",
    "parse_page_ranges",
    "fragment_from_dict",
    "fragments_from_list",
    "fragments_to_list",
    "page_fragments_from_list",
]
