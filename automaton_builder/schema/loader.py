"""Loading, parsing and saving automaton snapshots."""

import json
from pathlib import Path

import yaml
from pydantic import ValidationError

from .errors import SnapshotLoadError, SnapshotValidationError
from .models import Snapshot


def load_document(path: str | Path) -> dict:
    """Load a snapshot file and return the raw data.

    JSON is a subset of YAML, so both ``.json`` and ``.yaml`` files are
    accepted.

    Args:
        path: Path to the snapshot file.

    Returns:
        The parsed document as a dictionary.

    Raises:
        SnapshotLoadError: If the file cannot be read or parsed.
    """
    path = Path(path)

    if not path.exists():
        raise SnapshotLoadError(f"File not found: {path}", str(path))

    if not path.is_file():
        raise SnapshotLoadError(f"Not a file: {path}", str(path))

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SnapshotLoadError(f"Invalid snapshot document: {e}", str(path)) from e
    except OSError as e:
        raise SnapshotLoadError(f"Cannot read file: {e}", str(path)) from e

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise SnapshotLoadError(
            f"Expected a mapping at root, got {type(data).__name__}", str(path)
        )

    return data


def parse_snapshot(path: str | Path) -> Snapshot:
    """Load and parse a snapshot file.

    Raises:
        SnapshotLoadError: If the file cannot be read or parsed.
        SnapshotValidationError: If the data fails validation.
    """
    data = load_document(path)
    return parse_snapshot_data(data)


def parse_snapshot_from_string(text: str) -> Snapshot:
    """Parse a JSON (or YAML) string into a Snapshot.

    Raises:
        SnapshotLoadError: If the text cannot be parsed.
        SnapshotValidationError: If the data fails validation.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SnapshotLoadError(f"Invalid snapshot document: {e}") from e

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise SnapshotLoadError(f"Expected a mapping at root, got {type(data).__name__}")

    return parse_snapshot_data(data)


def parse_snapshot_data(data: dict) -> Snapshot:
    """Validate raw data into a Snapshot and check its references.

    Args:
        data: The raw snapshot data.

    Returns:
        The parsed Snapshot.

    Raises:
        SnapshotValidationError: If the data fails validation, repeats an id,
            or a transition references an undeclared state or token.
    """
    try:
        snapshot = Snapshot.model_validate(data)
    except ValidationError as e:
        errors = [
            {
                "loc": ".".join(str(x) for x in err["loc"]),
                "msg": err["msg"],
                "type": err["type"],
            }
            for err in e.errors()
        ]
        raise SnapshotValidationError(
            f"Snapshot validation failed with {len(errors)} error(s)", errors
        ) from e

    errors = check_snapshot_references(snapshot)
    if errors:
        raise SnapshotValidationError(
            f"Snapshot has {len(errors)} reference error(s)", errors
        )

    return snapshot


def check_snapshot_references(snapshot: Snapshot) -> list[dict]:
    """Find repeated ids and transitions whose endpoints or tokens are not declared.

    Returns:
        Error dicts in the same shape as pydantic validation errors.
    """
    errors: list[dict] = []

    for section in ("states", "alphabet", "transitions"):
        seen: set[str] = set()
        for index, entry in enumerate(getattr(snapshot, section)):
            if entry.id in seen:
                errors.append({
                    "loc": f"{section}.{index}.id",
                    "msg": f"Duplicate id '{entry.id}'",
                    "type": "duplicate_id",
                })
            seen.add(entry.id)

    state_ids = {s.id for s in snapshot.states}
    token_ids = {t.id for t in snapshot.alphabet}

    for index, transition in enumerate(snapshot.transitions):
        for field_name in ("source", "dest"):
            ref = getattr(transition, field_name)
            if ref not in state_ids:
                errors.append({
                    "loc": f"transitions.{index}.{field_name}",
                    "msg": f"Unknown state id '{ref}'",
                    "type": "dangling_reference",
                })
        for token_index, token_id in enumerate(transition.tokens):
            if token_id not in token_ids:
                errors.append({
                    "loc": f"transitions.{index}.tokens.{token_index}",
                    "msg": f"Unknown token id '{token_id}'",
                    "type": "dangling_reference",
                })

    return errors


def dump_snapshot(snapshot: Snapshot) -> str:
    """Serialize a snapshot to an indented JSON string."""
    return json.dumps(snapshot.to_dict(), indent=4)


def save_snapshot(snapshot: Snapshot, path: str | Path) -> Path:
    """Write a snapshot to disk as JSON.

    Raises:
        SnapshotLoadError: If the file cannot be written.
    """
    path = Path(path)
    try:
        path.write_text(dump_snapshot(snapshot), encoding="utf-8")
    except OSError as e:
        raise SnapshotLoadError(f"Cannot write file: {e}", str(path)) from e
    return path
