from ..wizard import WizardSession


class NullRecorder:
    async def record(self, session_id: str, session: WizardSession) -> None:
        return None
