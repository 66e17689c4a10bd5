"""Schema layer for the serialized automaton snapshot."""

from .errors import SnapshotLoadError, SnapshotValidationError
from .models import (
    SerializedState,
    SerializedToken,
    SerializedTransition,
    Snapshot,
)
from .loader import (
    check_snapshot_references,
    dump_snapshot,
    load_document,
    parse_snapshot,
    parse_snapshot_data,
    parse_snapshot_from_string,
    save_snapshot,
)

__all__ = [
    "SnapshotLoadError",
    "SnapshotValidationError",
    "SerializedState",
    "SerializedToken",
    "SerializedTransition",
    "Snapshot",
    "check_snapshot_references",
    "dump_snapshot",
    "load_document",
    "parse_snapshot",
    "parse_snapshot_data",
    "parse_snapshot_from_string",
    "save_snapshot",
]
