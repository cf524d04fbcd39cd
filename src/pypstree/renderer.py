"""Plain-text rendering of a process forest."""

from collections.abc import Iterator

from pypstree.models import Forest, ProcessTreeNode

STYLES = ("indent", "ascii")


def format_label(node: ProcessTreeNode) -> str:
    """Format the text shown for a single process."""
    return f"{node.name} #{node.pid}"


class TreeLines:
    """
    Lines of a rendered forest, produced lazily.

    Every call to ``iter()`` starts a fresh traversal, so the same
    object can be printed, compared or joined any number of times with
    identical results. The forest is never modified.
    """

    def __init__(self, forest: Forest, style: str = "indent", indent: int = 2) -> None:
        if style not in STYLES:
            raise ValueError(f"unknown style {style!r}, expected one of {STYLES}")
        if indent < 1:
            raise ValueError(f"indent must be at least 1, got {indent}")
        self._forest = forest
        self._style = style
        self._indent = indent

    def __iter__(self) -> Iterator[str]:
        if self._style == "ascii":
            for root in self._forest:
                yield from _render_ascii(root)
        else:
            unit = " " * self._indent
            for root in self._forest:
                for depth, node in root.walk():
                    yield f"{unit * depth}- {format_label(node)}"

    def __str__(self) -> str:
        return "\n".join(self)


def render(forest: Forest, style: str = "indent", indent: int = 2) -> TreeLines:
    """
    Render a forest depth-first, roots and children in stored order.

    Args:
        forest: Output of ``build_forest``.
        style: ``"indent"`` prefixes each line with ``indent`` spaces per
            level and a ``- `` bullet. ``"ascii"`` draws box connectors,
            four characters per level.
        indent: Spaces per level for the ``"indent"`` style.
    """
    return TreeLines(forest, style=style, indent=indent)


def _render_ascii(root: ProcessTreeNode) -> Iterator[str]:
    yield format_label(root)
    # (node, prefix, is_last) entries, popped in pre-order
    stack = [(child, "", i == len(root.children) - 1)
             for i, child in reversed(list(enumerate(root.children)))]
    while stack:
        node, prefix, is_last = stack.pop()
        connector = "└── " if is_last else "├── "
        yield prefix + connector + format_label(node)
        child_prefix = prefix + ("    " if is_last else "│   ")
        stack.extend(
            (child, child_prefix, i == len(node.children) - 1)
            for i, child in reversed(list(enumerate(node.children)))
        )
