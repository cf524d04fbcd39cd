"""Tests for plain-text rendering."""

import pytest

from pypstree.builder import build_forest
from pypstree.models import NO_PARENT, ProcessRecord
from pypstree.renderer import TreeLines, format_label, render

from test_builder import chain_length, random_records


@pytest.fixture
def forest():
    records = [
        ProcessRecord(1, NO_PARENT, "init"),
        ProcessRecord(2, 1, "shell"),
        ProcessRecord(3, 2, "editor"),
        ProcessRecord(4, 1, "cron"),
        ProcessRecord(7, 99, "orphan"),
    ]
    return build_forest(records)


def test_format_label():
    """Test a label shows name and pid."""
    forest = build_forest([ProcessRecord(42, NO_PARENT, "sshd")])

    assert format_label(forest[0]) == "sshd #42"


class TestIndentStyle:
    """Tests for the default indent style."""

    def test_chain_lines(self):
        """Test init -> shell -> editor renders at depths 0, 1, 2."""
        forest = build_forest([
            ProcessRecord(1, NO_PARENT, "init"),
            ProcessRecord(2, 1, "shell"),
            ProcessRecord(3, 2, "editor"),
        ])

        assert list(render(forest)) == [
            "- init #1",
            "  - shell #2",
            "    - editor #3",
        ]

    def test_preorder_across_roots(self, forest):
        """Test roots in order, each followed by its subtree."""
        assert list(render(forest)) == [
            "- init #1",
            "  - shell #2",
            "    - editor #3",
            "  - cron #4",
            "- orphan #7",
        ]

    def test_custom_indent(self, forest):
        """Test the indent width is configurable."""
        lines = list(render(forest, indent=4))

        assert lines[2] == "        - editor #3"

    def test_self_parent_rendered_as_root(self):
        """Test a self-parented process prints once, at depth 0."""
        lines = list(render(build_forest([ProcessRecord(8, 8, "self")])))

        assert lines == ["- self #8"]

    def test_two_roots(self):
        """Test two parentless processes print in input order."""
        forest = build_forest([ProcessRecord(5, NO_PARENT, "a"), ProcessRecord(6, NO_PARENT, "b")])

        assert list(render(forest)) == ["- a #5", "- b #6"]


class TestAsciiStyle:
    """Tests for the connector style."""

    def test_connectors(self, forest):
        """Test branch and last-child connectors."""
        assert list(render(forest, style="ascii")) == [
            "init #1",
            "├── shell #2",
            "│   └── editor #3",
            "└── cron #4",
            "orphan #7",
        ]

    def test_prefix_width_tracks_depth(self, forest):
        """Test every level adds four characters of prefix."""
        lines = list(render(forest, style="ascii"))
        depths = [depth for root in forest for depth, _ in root.walk()]

        for line, depth in zip(lines, depths):
            label = line[4 * depth:]
            assert not label.startswith((" ", "│", "├", "└", "─"))


class TestTreeLines:
    """Tests for the lazy line sequence."""

    def test_restartable(self, forest):
        """Test iterating twice gives the same lines."""
        lines = render(forest)

        assert list(lines) == list(lines)

    def test_rendering_twice_is_identical(self, forest):
        """Test two renderings of one forest are byte-identical."""
        assert str(render(forest)) == str(render(forest))

    def test_lazy(self, forest):
        """Test lines are produced on demand."""
        iterator = iter(render(forest))

        assert next(iterator) == "- init #1"

    def test_does_not_modify_forest(self, forest):
        """Test the forest is unchanged after rendering."""
        before = [(d, n.record) for root in forest for d, n in root.walk()]

        list(render(forest))
        list(render(forest, style="ascii"))

        assert [(d, n.record) for root in forest for d, n in root.walk()] == before

    def test_str_joins_lines(self, forest):
        """Test str() gives newline-separated output."""
        assert str(render(forest)).splitlines() == list(render(forest))

    def test_empty_forest(self):
        """Test an empty forest renders no lines."""
        assert list(render([])) == []

    def test_unknown_style(self, forest):
        """Test an unknown style is rejected."""
        with pytest.raises(ValueError):
            TreeLines(forest, style="fancy")

    def test_indent_must_be_positive(self, forest):
        """Test a zero indent is rejected."""
        with pytest.raises(ValueError):
            render(forest, indent=0)


@pytest.mark.parametrize("seed", range(5))
def test_each_record_rendered_once_at_its_depth(seed):
    """Test every record appears exactly once, indented by its chain length."""
    records = random_records(seed)
    by_pid = {record.pid: record for record in records}

    lines = list(render(build_forest(records)))

    assert len(lines) == len(records)
    for record in records:
        matching = [line for line in lines if line.endswith(f"- {record.name} #{record.pid}")]
        assert len(matching) == 1
        indent = len(matching[0]) - len(matching[0].lstrip(" "))
        assert indent == 2 * chain_length(record, by_pid)
