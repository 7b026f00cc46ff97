"""
Gating Policies.

Each PageStatus has exactly one policy object that knows how to gate a
content object and everything below it. GatingPolicyApplier resolves ids,
applies the course's configured policy and records what it gated.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from loguru import logger

from src.adaptive.gating_state import PersistedGatingState
from src.adaptive.models import PageStatus
from src.course.models import ContentNode, CourseTree


@dataclass(frozen=True)
class GatingPolicy:
    """Flags set on the gated node and its descendants, plus the node's marker class."""

    status: PageStatus
    flags: tuple[tuple[str, bool], ...]

    def apply(self, tree: CourseTree, node: ContentNode) -> None:
        tree.set_on_children(node.id, **dict(self.flags))
        marker = self.status.marker_class
        if marker is not None:
            tree.add_class(node, marker)


POLICIES: dict[PageStatus, GatingPolicy] = {
    PageStatus.UNAVAILABLE: GatingPolicy(
        PageStatus.UNAVAILABLE,
        (("is_available", False),),
    ),
    PageStatus.OPTIONAL: GatingPolicy(
        PageStatus.OPTIONAL,
        (("is_optional", True),),
    ),
    PageStatus.COMPLETE: GatingPolicy(
        PageStatus.COMPLETE,
        (
            ("is_locked", False),
            ("is_complete", True),
            ("is_interaction_complete", True),
        ),
    ),
}

_missing = set(PageStatus) - set(POLICIES)
if _missing:
    raise RuntimeError(f"No gating policy for: {sorted(s.value for s in _missing)}")


def policy_for(status: PageStatus) -> GatingPolicy:
    return POLICIES[status]


class GatingPolicyApplier:
    """Apply the configured gating policy to content ids."""

    def __init__(self, tree: CourseTree, gating_state: PersistedGatingState, status: PageStatus):
        self._tree = tree
        self._gating_state = gating_state
        self.policy = policy_for(status)

    @property
    def status(self) -> PageStatus:
        return self.policy.status

    def apply(self, content_ids: Sequence[str] | None, persist: bool) -> list[str]:
        """
        Gate every resolvable id; unknown ids are skipped without aborting the batch.

        Args:
            content_ids: Content object ids to gate
            persist: Record the ids in offline storage (and flush)

        Returns:
            Ids that resolved and were gated
        """
        if not content_ids:
            return []

        logger.info(f"{self.status.display_name} {list(content_ids)} persist={persist}")

        applied = []
        for content_id in content_ids:
            node = self._tree.find_by_id(content_id)
            if node is None:
                logger.debug(f"Skipping unknown content id {content_id}")
                continue
            self.policy.apply(self._tree, node)
            applied.append(content_id)

        if persist:
            self._gating_state.add(content_ids)
        return applied
