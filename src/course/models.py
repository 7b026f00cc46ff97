"""
Course Model Tree.

Typed content nodes (course -> pages -> blocks -> components) and the tree that
owns them. Nodes are created once when the course definition loads and are
mutated in place for the rest of the session; they are never removed.

Attribute updates go through CourseTree so that a typo in an attribute name
fails loudly instead of silently creating a new field.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, fields
from enum import Enum

from loguru import logger


class ContentKind(str, Enum):
    """Level of a node in the course hierarchy."""

    COURSE = "course"
    PAGE = "page"
    BLOCK = "block"
    COMPONENT = "component"


@dataclass(frozen=True)
class BlockAdaptiveConfig:
    """Author annotation on a block: the topics its mastery is evidence for."""

    related_topics: tuple[str, ...] = ()


@dataclass
class CompletionCriteria:
    """Course-wide completion rules (mutable at runtime)."""

    require_content_completed: bool = True
    require_assessment_completed: bool = False


@dataclass(eq=False)
class ContentNode:
    """
    A node in the course tree.

    Identity semantics (eq=False): two nodes are the same only if they are the
    same object, which is what block de-duplication relies on.
    """

    id: str
    kind: ContentKind
    parent_id: str | None = None
    title: str = ""
    child_ids: list[str] = field(default_factory=list)

    # Status flags
    is_available: bool = True
    is_optional: bool = False
    is_complete: bool = False
    is_locked: bool = False
    is_interaction_complete: bool = False

    # Question state (components only)
    is_question_type: bool = False
    is_correct: bool | None = None

    # Presentation markers, de-duplicated
    classes: set[str] = field(default_factory=set)

    adaptive_content: BlockAdaptiveConfig | None = None

    def __repr__(self) -> str:
        return f"<ContentNode {self.kind.value} {self.id}>"

    @property
    def css_classes(self) -> str:
        """Space-separated class string in a stable order."""
        return " ".join(sorted(self.classes))


_MUTABLE_FLAGS = frozenset(
    f.name
    for f in fields(ContentNode)
    if f.name.startswith("is_")
)


class CourseTree:
    """Owns every ContentNode of one course and provides id-based access."""

    def __init__(self, nodes: list[ContentNode] | None = None):
        self._nodes: dict[str, ContentNode] = {}
        self._root_id: str | None = None
        for node in nodes or []:
            self.add(node)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add(self, node: ContentNode) -> ContentNode:
        """
        Add a node; links it under its parent when the parent is already present.

        Raises:
            ValueError: On a duplicate id or a second course root
        """
        if node.id in self._nodes:
            raise ValueError(f"Duplicate content id: {node.id}")
        if node.kind is ContentKind.COURSE:
            if self._root_id is not None:
                raise ValueError(f"Course tree already has a root: {self._root_id}")
            self._root_id = node.id

        self._nodes[node.id] = node
        if node.parent_id is not None and node.parent_id in self._nodes:
            parent = self._nodes[node.parent_id]
            if node.id not in parent.child_ids:
                parent.child_ids.append(node.id)
        return node

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def course(self) -> ContentNode | None:
        if self._root_id is None:
            return None
        return self._nodes[self._root_id]

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def find_by_id(self, node_id: str) -> ContentNode | None:
        return self._nodes.get(node_id)

    def parent(self, node: ContentNode) -> ContentNode | None:
        if node.parent_id is None:
            return None
        return self._nodes.get(node.parent_id)

    def children(self, node: ContentNode) -> list[ContentNode]:
        return [self._nodes[child_id] for child_id in node.child_ids if child_id in self._nodes]

    def descendants(self, node: ContentNode) -> Iterator[ContentNode]:
        """Depth-first, pre-order walk of everything below `node`."""
        for child in self.children(node):
            yield child
            yield from self.descendants(child)

    def of_kind(self, kind: ContentKind) -> list[ContentNode]:
        return [node for node in self._nodes.values() if node.kind is kind]

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set(self, node: ContentNode, **attrs: bool) -> None:
        """Update status flags on a single node."""
        for name, value in attrs.items():
            if name not in _MUTABLE_FLAGS:
                raise AttributeError(f"ContentNode has no settable flag {name!r}")
            setattr(node, name, value)

    def set_on_children(self, node_id: str, **attrs: bool) -> bool:
        """
        Apply flag changes to a node and every one of its descendants.

        Returns:
            False if the id does not resolve, True otherwise
        """
        node = self.find_by_id(node_id)
        if node is None:
            logger.debug(f"set_on_children: no content with id {node_id}")
            return False

        self.set(node, **attrs)
        for descendant in self.descendants(node):
            self.set(descendant, **attrs)
        return True

    def add_class(self, node: ContentNode, class_name: str) -> None:
        """Add a presentation marker; adding the same marker twice has no effect."""
        node.classes.add(class_name)
