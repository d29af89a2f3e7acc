import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class EmailStore:
    """Contact emails remembered per device, persisted to a small JSON file."""

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path) if path else None
        self._emails: dict[str, str] = self._load()

    def _load(self) -> dict[str, str]:
        if self._path is None or not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.warning("Could not read contact emails from %s", self._path)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str) and v}

    def get(self, device_id: str) -> str | None:
        return self._emails.get(device_id)

    def save(self, device_id: str, email: str) -> None:
        self._emails[device_id] = email
        if self._path is None:
            return
        try:
            self._path.write_text(json.dumps(self._emails, indent=2), encoding="utf-8")
        except OSError:
            logger.exception("Could not persist contact email to %s", self._path)
