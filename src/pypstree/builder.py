"""Turns a flat process snapshot into a forest of process trees."""

import logging
from collections import defaultdict
from collections.abc import Sequence

from pypstree.errors import CycleDetected, MalformedRecord
from pypstree.models import Forest, ProcessRecord, ProcessTreeNode

logger = logging.getLogger(__name__)


def build_forest(records: Sequence[ProcessRecord]) -> Forest:
    """
    Build the process forest for a snapshot.

    A record is a root when its ppid names no other record in the
    snapshot: the no-parent sentinel, a parent that already exited, or
    the record itself. Roots and siblings keep their input order.

    Args:
        records: The snapshot. It is only read, never modified.

    Raises:
        MalformedRecord: Two records share a pid.
        CycleDetected: Some records form a parent loop and cannot be
            reached from any root. Nothing is returned in that case.
    """
    by_pid: dict[int, ProcessRecord] = {}
    for record in records:
        if record.pid in by_pid:
            raise MalformedRecord(record, "duplicate pid %d" % record.pid)
        by_pid[record.pid] = record

    roots: list[ProcessRecord] = []
    children_of: defaultdict[int, list[ProcessRecord]] = defaultdict(list)
    for record in records:
        if record.ppid == record.pid or record.ppid not in by_pid:
            roots.append(record)
        else:
            children_of[record.ppid].append(record)

    limit = len(records)
    forest = [_populate(ProcessTreeNode(record), children_of, limit)
              for record in roots]

    placed = sum(root.size() for root in forest)
    if placed != len(records):
        seen = {node.pid for root in forest for _, node in root.walk()}
        unplaced = [record for record in records if record.pid not in seen]
        cycles = _find_cycles(unplaced, by_pid)
        raise CycleDetected(
            [record.pid for record in unplaced],
            "parent cycle detected: %s (%d process(es) unreachable)" % (
                "; ".join(" -> ".join(str(pid) for pid in cycle)
                          for cycle in cycles),
                len(unplaced),
            ),
        )

    logger.debug("built %d tree(s) from %d record(s)", len(forest), len(records))
    return forest


def _populate(root: ProcessTreeNode,
              children_of: dict[int, list[ProcessRecord]],
              limit: int) -> ProcessTreeNode:
    """Attach every descendant of root, depth-first, siblings in input
    order. Uses an explicit stack so deep ancestry chains are fine.
    """
    stack = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        # No acyclic path can be longer than the snapshot itself.
        if depth >= limit:
            raise CycleDetected([node.pid])
        for record in children_of.get(node.pid, ()):
            node.children.append(ProcessTreeNode(record))
        stack.extend((child, depth + 1) for child in reversed(node.children))
    return root


def _find_cycles(unplaced: list[ProcessRecord],
                 by_pid: dict[int, ProcessRecord]) -> list[tuple[int, ...]]:
    """Return each distinct parent loop once, starting from its first
    member in input order.
    """
    cycles: list[tuple[int, ...]] = []
    done: set[int] = set()
    for record in unplaced:
        path: list[int] = []
        pid = record.pid
        while pid not in done and pid not in path:
            path.append(pid)
            pid = by_pid[pid].ppid
        if pid in path:
            cycles.append(tuple(path[path.index(pid):]))
        done.update(path)
    return cycles
