"""Exceptions raised by pypstree."""


class PstreeError(Exception):
    """Base exception class. All other pypstree exceptions inherit
    from this one.
    """

    def __init__(self, msg=""):
        Exception.__init__(self, msg)
        self.msg = msg

    def __str__(self):
        return self.msg


class SourceUnavailable(PstreeError):
    """Exception raised when the process list cannot be read at all
    (permission denied on /proc, OS API failure, ...).
    """


class CycleDetected(PstreeError):
    """Exception raised when parent links loop back on themselves
    (A's parent is B, B's parent is A) so the records involved can
    never hang off a root.
    """

    def __init__(self, pids, msg=None):
        self.pids = tuple(pids)
        if msg is None:
            msg = "parent cycle among pids %s" % ", ".join(
                str(pid) for pid in self.pids)
        PstreeError.__init__(self, msg)


class MalformedRecord(PstreeError):
    """Exception raised for a record with a non-positive pid, an empty
    name or a pid that was already seen.
    """

    def __init__(self, record, msg=None):
        self.record = record
        if msg is None:
            msg = "malformed process record %r" % (record,)
        PstreeError.__init__(self, msg)
