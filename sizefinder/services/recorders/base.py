from typing import Protocol

from ..wizard import WizardSession


class SessionRecorder(Protocol):
    async def record(self, session_id: str, session: WizardSession) -> None:
        ...
