"""Process record sources for pypstree."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

import psutil

from pypstree.errors import MalformedRecord, SourceUnavailable
from pypstree.models import NO_PARENT, ProcessRecord

logger = logging.getLogger(__name__)


def validate_record(record: ProcessRecord) -> ProcessRecord:
    """Return the record unchanged, or raise MalformedRecord."""
    if record.pid <= 0:
        raise MalformedRecord(record, "non-positive pid %d" % record.pid)
    if not record.name:
        raise MalformedRecord(record, "empty name for pid %d" % record.pid)
    return record


class _RecordSource(ABC):
    """Shared ingestion logic for the concrete sources."""

    def __init__(self, strict: bool = False) -> None:
        """
        Args:
            strict: Raise on malformed records instead of dropping them.
        """
        self._strict = strict

    @property
    def strict(self) -> bool:
        return self._strict

    @abstractmethod
    def collect(self) -> tuple[ProcessRecord, ...]:
        """Return a point-in-time snapshot of the process table."""

    def _accept(self, records: list[ProcessRecord], record: ProcessRecord) -> None:
        try:
            records.append(validate_record(record))
        except MalformedRecord as exc:
            if self._strict:
                raise
            logger.debug("skipping %s", exc)


class PsutilSource(_RecordSource):
    """
    Reads the process table through psutil.

    Processes that exit while the table is being read are skipped. The
    result is a point-in-time snapshot ordered by pid.
    """

    def collect(self) -> tuple[ProcessRecord, ...]:
        records: list[ProcessRecord] = []
        try:
            for proc in psutil.process_iter(attrs=["pid", "ppid", "name"]):
                try:
                    info = proc.info
                    record = ProcessRecord(
                        pid=info.get("pid", 0),
                        ppid=info.get("ppid") or NO_PARENT,
                        name=info.get("name") or "",
                    )
                except (psutil.NoSuchProcess, psutil.ZombieProcess):
                    continue
                self._accept(records, record)
        except (psutil.Error, OSError) as exc:
            raise SourceUnavailable(f"cannot list processes: {exc}") from exc

        logger.debug("psutil reported %d process(es)", len(records))
        return tuple(records)


class ProcFSSource(_RecordSource):
    """
    Reads ``<proc_root>/<pid>/status`` files directly (Linux).

    A process can exit between listing the directory and opening its
    status file; such processes are skipped.
    """

    def __init__(self, proc_root: Path | str = "/proc", strict: bool = False) -> None:
        """
        Args:
            proc_root: Mount point of the proc filesystem.
            strict: Raise on malformed records instead of dropping them.
        """
        super().__init__(strict=strict)
        self._proc_root = Path(proc_root)

    @property
    def proc_root(self) -> Path:
        return self._proc_root

    def collect(self) -> tuple[ProcessRecord, ...]:
        try:
            pids = sorted(int(entry.name) for entry in self._proc_root.iterdir()
                          if entry.name.isdigit())
        except OSError as exc:
            raise SourceUnavailable(f"cannot read {self._proc_root}: {exc}") from exc

        records: list[ProcessRecord] = []
        for pid in pids:
            record = self._read_status(self._proc_root / str(pid) / "status")
            if record is not None:
                self._accept(records, record)

        logger.debug("%s listed %d process(es)", self._proc_root, len(records))
        return tuple(records)

    def _read_status(self, path: Path) -> ProcessRecord | None:
        """Parse the Name, Pid and PPid lines of a status file."""
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except (FileNotFoundError, ProcessLookupError, NotADirectoryError):
            # Process exited during the scan
            return None
        except PermissionError:
            logger.debug("no permission to read %s", path)
            return None

        fields: dict[str, str] = {}
        for line in text.splitlines():
            key, sep, value = line.partition(":")
            if sep:
                fields[key.strip()] = value.strip()

        try:
            return ProcessRecord(
                pid=int(fields["Pid"]),
                ppid=int(fields["PPid"]),
                name=fields["Name"],
            )
        except (KeyError, ValueError):
            logger.debug("incomplete status file %s", path)
            return None


SOURCES = {
    "psutil": PsutilSource,
    "procfs": ProcFSSource,
}


def get_source(name: str = "psutil", strict: bool = False) -> _RecordSource:
    """Instantiate a source by name."""
    try:
        source_class = SOURCES[name]
    except KeyError:
        raise ValueError(f"unknown source {name!r}, expected one of {sorted(SOURCES)}") from None
    return source_class(strict=strict)
