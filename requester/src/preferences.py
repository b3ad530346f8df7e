"""Theme persistence for the client, kept in a small JSON file."""

import json
from pathlib import Path
from typing import Optional

from requester.src.state import Theme
from shared.logging import get_logger

logger = get_logger(__name__)


class PreferenceStore:
    """Reads and writes the user's theme choice."""

    def __init__(self, path: Path):
        self.path = Path(path).expanduser()

    def _read(self) -> dict:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning("preferences_unreadable", path=str(self.path), error=str(e))
            return {}
        return data if isinstance(data, dict) else {}

    def load_theme(self) -> Optional[Theme]:
        """Stored theme, or None when nothing valid is stored."""
        value = self._read().get("theme")
        try:
            return Theme(value) if value is not None else None
        except ValueError:
            logger.warning("preferences_invalid_theme", value=value)
            return None

    def save_theme(self, theme: Theme) -> None:
        data = self._read()
        data["theme"] = theme.value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")
