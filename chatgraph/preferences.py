"""Device-local preferences persisted as a small JSON file."""

import json
from pathlib import Path

from chatgraph.log_config import get_logger

log = get_logger("preferences")

LAST_WORKSPACE_KEY = "lastWorkspace"


class LocalPreferences:
    """Read and write the last-used workspace for this device."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            log.warning(f"Ignoring unreadable preferences file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    @property
    def last_workspace(self) -> str | None:
        value = self._read().get(LAST_WORKSPACE_KEY)
        return value if isinstance(value, str) and value else None

    @last_workspace.setter
    def last_workspace(self, workspace_id: str | None) -> None:
        data = self._read()
        if workspace_id:
            data[LAST_WORKSPACE_KEY] = workspace_id
        else:
            data.pop(LAST_WORKSPACE_KEY, None)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
