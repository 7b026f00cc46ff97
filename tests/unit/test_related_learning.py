"""
Unit tests for the related-learning index and block de-duplication.
"""

from src.adaptive.related_learning import build_related_learning_index, unique_parent_blocks
from src.course.models import BlockAdaptiveConfig, ContentKind, ContentNode


def _blocks(course, *ids):
    return [course.tree.find_by_id(block_id) for block_id in ids]


class TestUniqueParentBlocks:
    def test_blocks_with_several_questions_appear_once(self, course):
        questions = [course.tree.find_by_id(q) for q in ["q-05a", "q-05b", "q-10", "q-05a"]]
        blocks = unique_parent_blocks(questions, course.tree)
        assert [b.id for b in blocks] == ["b-05", "b-10"]

    def test_only_presented_questions_count(self, course):
        questions = [course.tree.find_by_id("q-15")]
        blocks = unique_parent_blocks(questions, course.tree)
        assert [b.id for b in blocks] == ["b-15"]

    def test_question_without_parent_is_ignored(self, course):
        orphan = ContentNode(id="q-orphan", kind=ContentKind.COMPONENT, parent_id="missing")
        assert unique_parent_blocks([orphan], course.tree) == []


class TestBuildRelatedLearningIndex:
    def test_inverts_block_topics(self, course):
        index = build_related_learning_index(_blocks(course, "b-05", "b-10", "b-15", "b-20"))

        assert list(index) == ["c-05", "c-10"]
        assert [b.id for b in index["c-05"]] == ["b-05", "b-10"]
        assert [b.id for b in index["c-10"]] == ["b-05", "b-15"]

    def test_block_listed_under_every_topic(self, course):
        index = build_related_learning_index(_blocks(course, "b-05"))
        b05 = course.tree.find_by_id("b-05")
        assert index["c-05"] == [b05]
        assert index["c-10"] == [b05]

    def test_index_holds_references_not_copies(self, course):
        index = build_related_learning_index(_blocks(course, "b-10"))
        assert index["c-05"][0] is course.tree.find_by_id("b-10")

    def test_blocks_without_topics_contribute_nothing(self, course):
        b20 = course.tree.find_by_id("b-20")
        empty = ContentNode(
            id="b-empty",
            kind=ContentKind.BLOCK,
            adaptive_content=BlockAdaptiveConfig(related_topics=()),
        )
        assert build_related_learning_index([b20, empty]) == {}

    def test_empty_input(self):
        assert build_related_learning_index([]) == {}
