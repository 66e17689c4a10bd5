"""Editor settings: layout constants and editing preferences."""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError


class SettingsError(Exception):
    """Raised when a settings file cannot be loaded or is invalid."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message)


class EditorSettings(BaseModel):
    """Tunable constants used by the layout engine and the editing facade."""

    node_radius: float = Field(default=30.0, gt=0)
    arrow_padding: float = Field(default=5.0, ge=0)

    # Curved (parallel) transitions
    curve_size: float = 40.0
    curve_label_offset: float = 20.0
    curve_tension: float = 0.5

    # Self-loops
    loop_angle_degrees: float = 60.0
    loop_distance: float = 30.0
    loop_label_offset: float = 20.0

    paste_offset_x: float = 20.0
    paste_offset_y: float = 20.0

    grid_spacing: float = Field(default=50.0, gt=0)
    snap_to_grid: bool = False

    state_label_prefix: str = "q"


def load_settings(path: str | Path | None = None) -> EditorSettings:
    """Load editor settings from a YAML file.

    Args:
        path: Path to the YAML settings file. ``None`` returns the defaults.

    Returns:
        The validated settings.

    Raises:
        SettingsError: If the file cannot be read, parsed or validated.
    """
    if path is None:
        return EditorSettings()

    path = Path(path)
    if not path.is_file():
        raise SettingsError(f"Settings file not found: {path}", str(path))

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SettingsError(f"Invalid YAML: {e}", str(path)) from e
    except OSError as e:
        raise SettingsError(f"Cannot read file: {e}", str(path)) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SettingsError(
            f"Expected YAML mapping at root, got {type(data).__name__}", str(path)
        )

    try:
        return EditorSettings.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(x) for x in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise SettingsError(f"Invalid settings: {problems}", str(path)) from e
