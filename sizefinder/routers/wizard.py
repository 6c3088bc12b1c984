import uuid
from typing import Dict
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
import structlog

from ..config import settings
from ..data.reference import get_reference_data
from ..schemas.wizard import DimensionField, HelpPanel, MeasurementBody, SessionView, UnitBody, UrlBody
from ..security import verify_api_key
from ..services.recorders import get_recorder, record_session
from ..services.wizard import WizardController, WizardSession, can_advance


logger = structlog.get_logger("sizefinder")

router = APIRouter(prefix="/wizard", tags=["wizard"], dependencies=[Depends(verify_api_key)])

# In-memory session store (single process). Finished sessions go to the configured recorder.
_sessions: Dict[str, WizardSession] = {}


def _controller(session_id: str, background: BackgroundTasks | None = None) -> WizardController:
    session = _sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")

    def _on_results(finished: WizardSession) -> None:
        if background is not None:
            background.add_task(record_session, get_recorder(settings.recorder), session_id, finished)

    return WizardController(
        get_reference_data().size_chart,
        session=session,
        on_results=_on_results,
        include_inseam=settings.include_inseam,
    )


def _view(session_id: str, ctl: WizardController) -> SessionView:
    reference = get_reference_data()
    session = ctl.session
    fields = []
    for dim in ctl.dimensions:
        guide = reference.guide_for(dim)
        fields.append(DimensionField(
            name=dim,
            title=guide.title if guide else dim.replace("_", " ").capitalize(),
            description=guide.description if guide else "",
            value=session.measurements.get(dim, ""),
        ))
    help_panel = None
    guide = reference.guide_for(session.active_help)
    if guide:
        help_panel = HelpPanel(dimension=session.active_help, title=guide.title, description=guide.description, video=guide.video)
    return SessionView(
        session_id=session_id,
        step=session.step.name.lower(),
        step_index=int(session.step),
        gender=session.gender,
        category=session.category,
        unit=session.unit,
        product_url=session.product_url,
        measurements=dict(session.measurements),
        dimensions=fields,
        active_help=help_panel,
        recommended_size=session.recommended_size,
        error=session.error,
        error_kinds=list(session.error_kinds),
        can_advance=can_advance(session),
    )


def _save(session_id: str, ctl: WizardController) -> SessionView:
    _sessions[session_id] = ctl.session
    return _view(session_id, ctl)


@router.post("/sessions")
async def create_session() -> SessionView:
    session_id = uuid.uuid4().hex
    _sessions[session_id] = WizardSession(unit=settings.default_unit if settings.default_unit in ("cm", "inch") else "cm")
    logger.info("wizard_session_created", session_id=session_id)
    return _view(session_id, _controller(session_id))


@router.get("/sessions/{session_id}")
async def get_session(session_id: str) -> SessionView:
    return _view(session_id, _controller(session_id))


@router.delete("/sessions/{session_id}")
async def delete_session(session_id: str):
    if _sessions.pop(session_id, None) is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return {"ok": True}


@router.post("/sessions/{session_id}/start")
async def start(session_id: str) -> SessionView:
    ctl = _controller(session_id)
    ctl.start()
    return _save(session_id, ctl)


@router.put("/sessions/{session_id}/url")
async def set_url(session_id: str, body: UrlBody) -> SessionView:
    ctl = _controller(session_id)
    ctl.set_product_url(body.url)
    return _save(session_id, ctl)


@router.post("/sessions/{session_id}/advance")
async def advance(session_id: str, background: BackgroundTasks) -> SessionView:
    ctl = _controller(session_id, background)
    ctl.advance()
    return _save(session_id, ctl)


@router.post("/sessions/{session_id}/back")
async def go_back(session_id: str) -> SessionView:
    ctl = _controller(session_id)
    ctl.go_back()
    return _save(session_id, ctl)


@router.put("/sessions/{session_id}/unit")
async def set_unit(session_id: str, body: UnitBody) -> SessionView:
    ctl = _controller(session_id)
    ctl.set_unit(body.unit)
    return _save(session_id, ctl)


@router.put("/sessions/{session_id}/measurements/{dimension}")
async def set_measurement(session_id: str, dimension: str, body: MeasurementBody) -> SessionView:
    ctl = _controller(session_id)
    ctl.set_measurement(dimension, body.value)
    return _save(session_id, ctl)


@router.post("/sessions/{session_id}/help/{dimension}")
async def toggle_help(session_id: str, dimension: str) -> SessionView:
    ctl = _controller(session_id)
    ctl.toggle_help(dimension)
    return _save(session_id, ctl)


@router.post("/sessions/{session_id}/start-over")
async def start_over(session_id: str) -> SessionView:
    ctl = _controller(session_id)
    ctl.start_over()
    return _save(session_id, ctl)
