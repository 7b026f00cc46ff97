"""
Related-Learning Index.

Authors associate 'related learning' topics with blocks, which is the easiest
direction to write. Gating needs the inverse, i.e. which blocks are evidence
for each topic:

    {"c-05": [<block b-05>, <block b-10>], "c-10": [<block b-05>, <block b-15>]}

With that index, a topic can be checked by asking whether every block filed
under it was answered correctly.
"""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from src.course.models import ContentNode, CourseTree

RelatedLearningIndex = dict[str, list[ContentNode]]


def unique_parent_blocks(questions: Iterable[ContentNode], tree: CourseTree) -> list[ContentNode]:
    """
    Blocks of the questions actually presented, first occurrence order.

    A block may hold several questions, and banking or randomisation means the
    presented set varies per attempt, so only these blocks count.
    """
    blocks: list[ContentNode] = []
    seen: set[int] = set()
    for question in questions:
        block = tree.parent(question)
        if block is None or id(block) in seen:
            continue
        seen.add(id(block))
        blocks.append(block)
    return blocks


def build_related_learning_index(blocks: Iterable[ContentNode]) -> RelatedLearningIndex:
    """Invert block -> topics into topic -> blocks. Blocks without topics are skipped."""
    index: RelatedLearningIndex = {}
    for block in blocks:
        config = block.adaptive_content
        if config is None or not config.related_topics:
            continue
        for topic_id in config.related_topics:
            index.setdefault(topic_id, []).append(block)

    logger.debug(
        f"Related learning index: "
        f"{ {topic: [b.id for b in evidence] for topic, evidence in index.items()} }"
    )
    return index
