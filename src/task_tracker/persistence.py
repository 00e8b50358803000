"""
Where the current session survives between runs.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from task_tracker.models.session import Session

logger = logging.getLogger(__name__)


class MemorySessionStore:
    """Keeps the session for the lifetime of the process only."""

    def __init__(self, session: Optional[Session] = None):
        self._session = session

    def load(self) -> Optional[Session]:
        return self._session

    def save(self, session: Session) -> None:
        self._session = session

    def clear(self) -> None:
        self._session = None


class FileSessionStore:
    """JSON file store, e.g. ~/.task-tracker/session.json. Readable by the owner only."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Optional[Session]:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, e)
            return None
        try:
            return Session.model_validate(raw)
        except ValidationError:
            logger.warning("Ignoring unreadable session file %s", self.path)
            return None

    def save(self, session: Session) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        # O_CREAT's mode only applies to new files
        self.path.chmod(0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(session.model_dump_json(indent=2))

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
