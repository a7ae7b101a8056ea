"""
Module: fragments

Purpose:
    Content fragment models. Leaf fragments (text, hand diagrams,
    auctions, images, ...) are produced by an external extraction step
    and are opaque here, except that text fragments expose their raw
    string. SolutionGroup is the one fragment kind this package builds.

Key Classes:
    - FragmentKind: Enumeration of fragment kinds
    - Fragment: Immutable leaf fragment
    - SolutionGroup: Labeled wrapper around one solution run

Used By:
    - fragments.interleaver: Wraps solution runs
    - fragments.cleanup: Rewrites text fragments
    - core.utils.serialization
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Mapping, Tuple, Union


class FragmentKind(str, Enum):
    """Kinds of content fragment."""

    TEXT = "text"
    CARD_HAND_DIAGRAM = "card_hand_diagram"
    AUCTION_TABLE = "auction_table"
    IMAGE = "image"
    VIDEO = "video"
    RESULTS_TABLE = "results_table"
    SOLUTION_GROUP = "solution_group"


@dataclass(frozen=True, slots=True)
class Fragment:
    """
    Leaf content fragment.

    Attributes:
        id: Fragment identifier (unique within one article)
        kind: Any kind except SOLUTION_GROUP
        data: Opaque payload; text fragments carry data["text"]

    Example:
        >>> f = Fragment.text_fragment("b1", "**Problem A** South holds...")
        >>> f.is_text
        True
    """

    id: str
    kind: FragmentKind
    data: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.kind is FragmentKind.SOLUTION_GROUP:
            raise ValueError("solution groups must be built with SolutionGroup")

    @property
    def is_text(self) -> bool:
        return self.kind is FragmentKind.TEXT

    @property
    def text(self) -> str:
        """Raw text for text fragments, empty string for every other kind."""
        if not self.is_text:
            return ""
        return str(self.data.get("text") or "")

    def with_text(self, text: str) -> Fragment:
        """Copy of a text fragment with its text replaced."""
        return replace(self, data={**self.data, "text": text})

    @classmethod
    def text_fragment(cls, id: str, text: str) -> Fragment:
        return cls(id=id, kind=FragmentKind.TEXT, data={"text": text})

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "type": self.kind.value, "data": dict(self.data)}


@dataclass(frozen=True, slots=True)
class SolutionGroup:
    """
    Wrapper holding the ordered solution content for one problem.

    Attributes:
        id: Group identifier, e.g. "sol-a"
        label: Display label, e.g. "Solution A"
        fragments: Wrapped leaf fragments, in order

    Invariants:
        - never contains another SolutionGroup (one nesting level)
    """

    id: str
    label: str
    fragments: Tuple[Fragment, ...] = ()

    def __post_init__(self) -> None:
        for inner in self.fragments:
            if isinstance(inner, SolutionGroup):
                raise ValueError(f"solution group {self.id} cannot contain group {inner.id}")

    @property
    def kind(self) -> FragmentKind:
        return FragmentKind.SOLUTION_GROUP

    @property
    def is_text(self) -> bool:
        return False

    @property
    def text(self) -> str:
        return ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": FragmentKind.SOLUTION_GROUP.value,
            "data": {
                "label": self.label,
                "blocks": [f.to_dict() for f in self.fragments],
            },
        }


AnyFragment = Union[Fragment, SolutionGroup]
