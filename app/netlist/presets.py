"""Analysis preset manager - save/load analysis configurations as named presets."""

import json
import logging
from pathlib import Path
from typing import Optional

from models.analysis import AnalysisConfig, parse_analysis

logger = logging.getLogger(__name__)

# Built-in presets shipped with the tool
BUILTIN_PRESETS = [
    {
        "name": "Default Transient",
        "analysis_type": "Transient",
        "builtin": True,
        "params": {"step": "1m", "stop": "1s"},
    },
    {
        "name": "Quick Transient",
        "analysis_type": "Transient",
        "builtin": True,
        "params": {"step": "10u", "stop": "10m"},
    },
    {
        "name": "Operating Point",
        "analysis_type": "Operating Point",
        "builtin": True,
        "params": {},
    },
    {
        "name": "Audio AC Sweep",
        "analysis_type": "AC Sweep",
        "builtin": True,
        "params": {"fStart": 20, "fStop": "20k", "points": 100, "sweepType": "dec"},
    },
    {
        "name": "Wide AC Sweep",
        "analysis_type": "AC Sweep",
        "builtin": True,
        "params": {"fStart": 1, "fStop": "1g", "points": 100, "sweepType": "dec"},
    },
]


class PresetManager:
    """Manages analysis presets (built-in + user-defined).

    User presets are stored as JSON in a user-writable file. Built-in presets
    are always available and cannot be overwritten or deleted. Passing
    ``preset_file=None`` keeps user presets in memory only.
    """

    def __init__(self, preset_file: Optional[Path] = None):
        self._preset_file = Path(preset_file) if preset_file is not None else None
        self._user_presets: list[dict] = []
        self._load()

    @staticmethod
    def default_preset_path() -> Path:
        """Return the default path for the user presets file."""
        return Path.home() / ".netlist-synth" / "analysis_presets.json"

    # --- Public API ---

    def get_presets(self, analysis_type: Optional[str] = None) -> list[dict]:
        """Return all presets, optionally filtered by analysis type."""
        all_presets = BUILTIN_PRESETS + self._user_presets
        if analysis_type:
            return [p for p in all_presets if p["analysis_type"] == analysis_type]
        return list(all_presets)

    def get_preset_by_name(self, name: str, analysis_type: Optional[str] = None) -> Optional[dict]:
        """Look up a preset by name (and optionally analysis type)."""
        for p in self.get_presets(analysis_type):
            if p["name"] == name:
                return p
        return None

    def analysis_for(self, name: str) -> AnalysisConfig:
        """
        Build the analysis a named preset describes.

        Raises:
            KeyError: If no preset has that name.
            ValueError: If the preset's analysis type is not supported.
        """
        preset = self.get_preset_by_name(name)
        if preset is None:
            raise KeyError(name)
        return parse_analysis({"type": preset["analysis_type"], "params": preset.get("params", {})})

    def save_preset(self, name: str, analysis_type: str, params: dict) -> dict:
        """Save a user preset. Overwrites if name+type already exists."""
        for bp in BUILTIN_PRESETS:
            if bp["name"] == name and bp["analysis_type"] == analysis_type:
                raise ValueError(f"Cannot overwrite built-in preset '{name}'")

        # Fails early on analysis types the netlist cannot express
        parse_analysis({"type": analysis_type, "params": params})

        self._user_presets = [
            p for p in self._user_presets if not (p["name"] == name and p["analysis_type"] == analysis_type)
        ]
        preset = {
            "name": name,
            "analysis_type": analysis_type,
            "params": params.copy(),
        }
        self._user_presets.append(preset)
        self._save()
        return preset

    def delete_preset(self, name: str, analysis_type: Optional[str] = None) -> bool:
        """Delete a user preset. Returns True if deleted, False if not found or built-in."""
        for bp in BUILTIN_PRESETS:
            if bp["name"] == name and (analysis_type is None or bp["analysis_type"] == analysis_type):
                return False

        before = len(self._user_presets)
        self._user_presets = [
            p
            for p in self._user_presets
            if not (p["name"] == name and (analysis_type is None or p["analysis_type"] == analysis_type))
        ]
        if len(self._user_presets) < before:
            self._save()
            return True
        return False

    # --- Persistence ---

    def _load(self):
        """Load user presets from disk."""
        if self._preset_file is None or not self._preset_file.exists():
            self._user_presets = []
            return
        try:
            data = json.loads(self._preset_file.read_text())
            self._user_presets = data.get("presets", [])
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Failed to load presets from %s: %s", self._preset_file, e)
            self._user_presets = []

    def _save(self):
        """Write user presets to disk."""
        if self._preset_file is None:
            return
        try:
            self._preset_file.parent.mkdir(parents=True, exist_ok=True)
            data = {"presets": self._user_presets}
            self._preset_file.write_text(json.dumps(data, indent=2))
        except OSError as e:
            logger.error("Failed to save presets to %s: %s", self._preset_file, e)
