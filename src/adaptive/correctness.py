"""
Block correctness evaluation with a per-pass cache.
"""

from __future__ import annotations

from loguru import logger

from src.adaptive.related_learning import RelatedLearningIndex
from src.course.models import ContentNode, CourseTree


class BlockCorrectnessEvaluator:
    """
    Answers "was every question in this block answered correctly?".

    Results are cached by block id for the lifetime of the evaluator. Create a
    new evaluator for every diagnostic pass; a cached answer does not follow
    later changes to question state.
    """

    def __init__(self, tree: CourseTree):
        self._tree = tree
        self._cache: dict[str, bool] = {}

    def all_children_correct(self, block: ContentNode) -> bool:
        """
        Check a block's question components.

        Returns:
            True only if the block has at least one question and all are correct
        """
        if block.id in self._cache:
            return self._cache[block.id]

        status = [
            child.is_correct is True
            for child in self._tree.children(block)
            if child.is_question_type
        ]
        # A block without questions is never evidence of mastery
        result = bool(status) and all(status)
        self._cache[block.id] = result
        return result

    def masterable_topics(self, index: RelatedLearningIndex) -> list[str]:
        """
        Topics whose every evidence block is all-correct, in index order.

        Partial correctness across a topic's blocks does not qualify it.
        """
        masterable = [
            topic_id
            for topic_id, blocks in index.items()
            if all(self.all_children_correct(block) for block in blocks)
        ]
        logger.debug(f"Masterable topics: {masterable} (of {list(index)})")
        return masterable
