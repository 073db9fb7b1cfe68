"""
Tests for greedy merging of semantic chunks.
"""

import random

import pytest

from src.splitter import (
    Chunk,
    ChunkType,
    ConfigurationError,
    GreedyMerger,
    MergePolicy,
    SectionInfo,
    SemanticMarkdownSplitter,
    paths_compatible,
)
from tests.conftest import MAX_SIZE, SAMPLE_DOCUMENTS


def _chunk(size, path=(), level=None, chunk_type=ChunkType.PARAGRAPH, fill="x"):
    path = list(path)
    return Chunk(
        content=fill * size,
        section=SectionInfo(path=path, level=len(path) if level is None else level),
        types=[chunk_type],
    )


def _merger(min_size=5, preferred=10, maximum=25, policy=MergePolicy.EXACT):
    base = SemanticMarkdownSplitter(min(preferred, maximum), maximum)
    return GreedyMerger(base, min_size, preferred, maximum, merge_policy=policy)


class TestMergeRule:

    def test_same_section_merged_up_to_max(self):
        merged = list(_merger().merge([_chunk(10), _chunk(10), _chunk(10)]))
        assert [c.size for c in merged] == [20, 10]

    def test_merge_may_reach_max_exactly(self):
        merged = list(_merger().merge([_chunk(10), _chunk(15)]))
        assert [c.size for c in merged] == [25]

    def test_different_sections_not_merged(self):
        merged = list(_merger().merge([_chunk(3, ["A"]), _chunk(3, ["B"])]))
        assert [c.section.path for c in merged] == [["A"], ["B"]]

    def test_preferred_size_does_not_stop_merge(self):
        merger = _merger(min_size=5, preferred=10, maximum=100)
        merged = list(merger.merge([_chunk(30), _chunk(30), _chunk(30)]))
        assert [c.size for c in merged] == [90]

    def test_undersized_chunk_kept_at_boundary(self):
        merged = list(_merger().merge([
            _chunk(2, ["A"]),
            _chunk(2, ["B"]),
            _chunk(2, ["B"]),
        ]))
        assert [c.size for c in merged] == [2, 4]
        assert merged[0].size < 5

    def test_oversized_input_passes_through(self):
        merger = _merger(maximum=25)
        merged = list(merger.merge([_chunk(20), _chunk(20)]))
        assert [c.size for c in merged] == [20, 20]

    def test_empty_input(self):
        assert list(_merger().merge([])) == []

    def test_merged_chunk_records_types(self):
        merged = list(_merger().merge([
            _chunk(3, ["A"], chunk_type=ChunkType.HEADING),
            _chunk(3, ["A"], chunk_type=ChunkType.CODE),
            _chunk(3, ["A"], chunk_type=ChunkType.HEADING),
        ]))
        assert merged[0].types == [ChunkType.HEADING, ChunkType.CODE]

    def test_content_concatenated_in_order(self):
        merged = list(_merger().merge([
            _chunk(3, fill="a"),
            _chunk(3, fill="b"),
        ]))
        assert merged[0].content == "aaabbb"


class TestMergePolicy:

    def test_exact_policy(self):
        assert paths_compatible(["A"], ["A"])
        assert not paths_compatible(["A"], ["A", "B"])
        assert not paths_compatible(["A", "B"], ["A"])

    def test_descendant_policy(self):
        policy = MergePolicy.DESCENDANT
        assert paths_compatible(["A"], ["A", "B"], policy)
        assert paths_compatible([], ["A"], policy)
        assert not paths_compatible(["A", "B"], ["A"], policy)
        assert not paths_compatible(["A"], ["C", "A"], policy)

    def test_exact_keeps_subsections_apart(self):
        chunks = [_chunk(3, ["A"], 1), _chunk(3, ["A", "B"], 2)]
        merged = list(_merger().merge(chunks))
        assert len(merged) == 2

    def test_descendant_absorbs_subsections(self):
        chunks = [
            _chunk(3, ["A"], 1),
            _chunk(3, ["A", "B"], 2),
            _chunk(3, ["A", "B", "C"], 3),
        ]
        merged = list(_merger(policy=MergePolicy.DESCENDANT).merge(chunks))

        assert len(merged) == 1
        assert merged[0].section.path == ["A"]
        assert merged[0].section.level == 1

    def test_descendant_does_not_absorb_siblings(self):
        chunks = [_chunk(3, ["A", "B"], 2), _chunk(3, ["A", "C"], 2)]
        merged = list(_merger(policy=MergePolicy.DESCENDANT).merge(chunks))
        assert len(merged) == 2

    def test_policy_accepts_string_value(self):
        assert _merger(policy="descendant").merge_policy == MergePolicy.DESCENDANT


class TestConfiguration:

    @pytest.mark.parametrize(
        "min_size, preferred, maximum",
        [
            (0, 10, 25),
            (-1, 10, 25),
            (30, 30, 25),
            (5, 30, 25),
            (10, 5, 25),
        ],
    )
    def test_invalid_sizes(self, min_size, preferred, maximum):
        base = SemanticMarkdownSplitter(1, 1)
        with pytest.raises(ConfigurationError):
            GreedyMerger(base, min_size, preferred, maximum)

    def test_base_splitter_ceiling_above_max(self):
        base = SemanticMarkdownSplitter(10, 50)
        with pytest.raises(ConfigurationError):
            GreedyMerger(base, 5, 10, 25)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            _merger(min_size=30, preferred=30, maximum=25)


class TestSplitText:

    def test_no_headings_merged_into_one_chunk(self, greedy_merger):
        """Example: paragraphs without headings share the empty path."""
        text = SAMPLE_DOCUMENTS["no_headings"]
        chunks = greedy_merger.split_text(text)

        assert len(chunks) == 1
        assert chunks[0].content == text
        assert chunks[0].section.path == []

    def test_sections_stay_separate(self, greedy_merger):
        chunks = greedy_merger.split_text(SAMPLE_DOCUMENTS["nested_headings"])

        assert [c.section.path for c in chunks] == [
            ["Guide"],
            ["Guide", "Install"],
            ["Guide", "Install", "Linux"],
            ["Guide", "Install", "macOS"],
            ["Guide", "Usage"],
            ["Reference"],
        ]

    def test_returns_list(self, greedy_merger):
        assert isinstance(greedy_merger.split_text("# A\n\ntext"), list)


def _partition(leaves, outputs):
    """Index of the first leaf of each output chunk."""
    starts = []
    position = 0
    for output in outputs:
        starts.append(position)
        consumed = ""
        while consumed != output.content:
            consumed += leaves[position].content
            position += 1
    assert position == len(leaves)
    return starts


class TestMergeProperties:
    """Randomized checks of the greedy rule."""

    @pytest.mark.parametrize("policy", [MergePolicy.EXACT, MergePolicy.DESCENDANT])
    def test_random_streams(self, policy):
        rng = random.Random(1234)
        merger = _merger(min_size=10, preferred=20, maximum=40, policy=policy)
        paths = [[], ["A"], ["A", "B"], ["A", "C"], ["D"]]

        for _ in range(200):
            leaves = []
            for i in range(rng.randint(0, 15)):
                path = rng.choice(paths)
                leaves.append(
                    _chunk(rng.randint(1, 40), path, fill=chr(97 + i))
                )
            outputs = list(merger.merge(leaves))

            assert "".join(c.content for c in outputs) == "".join(
                c.content for c in leaves
            )
            assert all(c.size <= 40 for c in outputs)

            starts = _partition(leaves, outputs)
            for index, output in enumerate(outputs):
                first = leaves[starts[index]]
                end = starts[index + 1] if index + 1 < len(outputs) else len(leaves)
                # Every leaf in the group was compatible with the group so far
                for leaf in leaves[starts[index] + 1:end]:
                    assert paths_compatible(
                        first.section.path, leaf.section.path, policy
                    )
                # The next group's first leaf could not have been appended
                if index + 1 < len(outputs):
                    following = leaves[starts[index + 1]]
                    assert not (
                        paths_compatible(
                            output.section.path, following.section.path, policy
                        )
                        and output.size + following.size <= 40
                    )

    def test_sample_documents_respect_bounds(self, greedy_merger):
        for name, text in SAMPLE_DOCUMENTS.items():
            chunks = greedy_merger.split_text(text)
            assert "".join(c.content for c in chunks) == text, name
            assert all(c.size <= MAX_SIZE for c in chunks), name
