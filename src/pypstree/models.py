"""Data models for pypstree."""

from collections.abc import Iterator
from dataclasses import dataclass, field

# ppid reported for the topmost process (init, kernel_task, ...)
NO_PARENT = 0


@dataclass(slots=True, frozen=True)
class ProcessRecord:
    """Immutable snapshot of one process as reported by a source."""

    pid: int
    ppid: int  # NO_PARENT, or a pid that may not be in the snapshot
    name: str


@dataclass(slots=True)
class ProcessTreeNode:
    """
    A process and the subtrees of its children.

    Each node owns its children outright. There is no link back to the
    parent, so traversal is always top-down.
    """

    record: ProcessRecord
    children: list["ProcessTreeNode"] = field(default_factory=list)

    @property
    def pid(self) -> int:
        return self.record.pid

    @property
    def name(self) -> str:
        return self.record.name

    def walk(self, depth: int = 0) -> Iterator[tuple[int, "ProcessTreeNode"]]:
        """Yield ``(depth, node)`` pairs for this subtree in pre-order."""
        stack = [(depth, self)]
        while stack:
            level, node = stack.pop()
            yield level, node
            stack.extend((level + 1, child) for child in reversed(node.children))

    def size(self) -> int:
        """Number of nodes in this subtree, itself included."""
        return sum(1 for _ in self.walk())


# Ordered root nodes, in the order their records appeared in the input.
Forest = list[ProcessTreeNode]
