import httpx

from ...config import settings
from ..wizard import WizardSession
from .file import session_record


class WebhookRecorder:
    def __init__(self, url: str | None = None, timeout: float = 10.0) -> None:
        self.url = url or settings.recorder_url
        self.timeout = timeout

    async def record(self, session_id: str, session: WizardSession) -> None:
        if not self.url:
            raise RuntimeError("SIZEFINDER_RECORDER_URL not configured")
        headers = {"X-Session-ID": session_id}
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.post(self.url, json=session_record(session_id, session), headers=headers)
            resp.raise_for_status()
