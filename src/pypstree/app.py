"""pypstree - Textual tree browser."""

from rich.text import Text
from textual.app import App, ComposeResult
from textual.widgets import Footer, Tree
from textual.widgets.tree import TreeNode

from pypstree.models import Forest, ProcessRecord, ProcessTreeNode
from pypstree.renderer import format_label


class ProcessTree(Tree[ProcessRecord]):
    """Tree widget holding one node per process."""

    DEFAULT_CSS = """
    ProcessTree {
        height: 1fr;
        border: solid $primary;
    }
    """

    def __init__(self, forest: Forest, **kwargs) -> None:
        """Initialize ProcessTree."""
        super().__init__("processes", **kwargs)
        self.show_root = False
        self._forest = forest

    def on_mount(self) -> None:
        """Populate the widget from the forest when mounted."""
        stack: list[tuple[TreeNode[ProcessRecord], ProcessTreeNode]] = [
            (self.root, root) for root in reversed(self._forest)
        ]
        while stack:
            parent, node = stack.pop()
            # Text() keeps process names out of markup parsing
            label = Text(format_label(node))
            if node.children:
                branch = parent.add(label, data=node.record)
                stack.extend((branch, child) for child in reversed(node.children))
            else:
                parent.add_leaf(label, data=node.record)
        self.root.expand_all()


class PstreeApp(App):
    """Interactive, non-refreshing view of a process forest."""

    TITLE = "pypstree"
    SUB_TITLE = "Process Tree"

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("e", "expand_all", "Expand all"),
        ("c", "collapse_all", "Collapse all"),
    ]

    def __init__(self, forest: Forest) -> None:
        """Initialize the PstreeApp."""
        super().__init__()
        self._forest = forest

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield ProcessTree(self._forest, id="process-tree")
        yield Footer()

    def action_expand_all(self) -> None:
        """Expand every process node."""
        self.query_one(ProcessTree).root.expand_all()

    def action_collapse_all(self) -> None:
        """Collapse every process node below the roots."""
        tree = self.query_one(ProcessTree)
        for node in tree.root.children:
            node.collapse_all()
