import json
import os
import time

from ...config import settings
from ..wizard import WizardSession


def session_record(session_id: str, session: WizardSession) -> dict:
    record = session.model_dump(mode="json")
    record["step"] = session.step.name.lower()
    record["session_id"] = session_id
    record["recorded_at"] = time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())
    return record


class FileRecorder:
    """Append finished sessions as JSON lines under the storage directory."""

    def __init__(self, path: str | None = None) -> None:
        self.path = path or os.path.join(settings.storage_dir, "sessions.jsonl")

    async def record(self, session_id: str, session: WizardSession) -> None:
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        line = json.dumps(session_record(session_id, session), ensure_ascii=False)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(line + "\n")
