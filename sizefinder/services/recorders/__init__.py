import structlog

from ..wizard import WizardSession
from .base import SessionRecorder
from .null import NullRecorder
from .file import FileRecorder


logger = structlog.get_logger("sizefinder")


def get_recorder(name: str | None) -> SessionRecorder:
    name = (name or "none").lower()
    if name in ("file", "jsonl"):
        return FileRecorder()
    if name in ("webhook", "http"):
        from .webhook import WebhookRecorder  # local import keeps httpx off the default path
        return WebhookRecorder()
    return NullRecorder()


async def record_session(recorder: SessionRecorder, session_id: str, session: WizardSession) -> None:
    """Fire-and-forget wrapper: recorder failures are logged, never raised."""
    try:
        await recorder.record(session_id, session)
        logger.info("session_recorded", session_id=session_id, recorder=type(recorder).__name__)
    except Exception as e:
        logger.warning("session_record_failed", session_id=session_id, recorder=type(recorder).__name__, error=str(e))
