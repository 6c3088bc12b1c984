"""Guided size-finder wizard.

The session is an immutable pydantic model; each user action is a plain
function ``(session, ...) -> session``. An action whose precondition does not
hold returns the session unchanged instead of raising.

Two behaviors are kept on purpose for compatibility with the widget this
service backs: switching the unit does not convert values already entered,
and starting over keeps the selected unit.
"""
from enum import IntEnum
from typing import Callable, Dict, List, Optional, Tuple

import structlog
from pydantic import BaseModel, ConfigDict, Field

from ..data.reference import SizeChart
from .classifier import ClassificationError, classify
from .dimensions import dimensions_for
from .matcher import recommend


logger = structlog.get_logger("sizefinder")


class WizardStep(IntEnum):
    INTRO = 0
    URL_INPUT = 1
    MEASUREMENTS = 2
    RESULTS = 3


class WizardSession(BaseModel):
    model_config = ConfigDict(frozen=True)

    step: WizardStep = WizardStep.INTRO
    gender: Optional[str] = None
    category: Optional[str] = None
    unit: str = "cm"
    measurements: Dict[str, str] = Field(default_factory=dict)
    active_help: Optional[str] = None
    recommended_size: Optional[str] = None
    product_url: str = ""
    error: Optional[str] = None
    error_kinds: Tuple[str, ...] = ()


def _declined(session: WizardSession, action: str, reason: str) -> WizardSession:
    logger.debug("wizard_action_declined", action=action, step=session.step.name, reason=reason)
    return session


def has_measurements(session: WizardSession) -> bool:
    return any(v.strip() for v in session.measurements.values())


def can_find_size(session: WizardSession) -> bool:
    return (
        session.step == WizardStep.MEASUREMENTS
        and bool(session.gender)
        and bool(session.category)
        and has_measurements(session)
    )


def can_advance(session: WizardSession) -> bool:
    if session.step == WizardStep.INTRO:
        return True
    if session.step == WizardStep.URL_INPUT:
        return bool(session.product_url.strip())
    if session.step == WizardStep.MEASUREMENTS:
        return can_find_size(session)
    return False


def start(session: WizardSession) -> WizardSession:
    if session.step != WizardStep.INTRO:
        return _declined(session, "start", "not_at_intro")
    return session.model_copy(update={"step": WizardStep.URL_INPUT})


def set_product_url(session: WizardSession, url: str) -> WizardSession:
    if session.step != WizardStep.URL_INPUT:
        return _declined(session, "set_product_url", "not_at_url_input")
    return session.model_copy(update={"product_url": url or "", "error": None, "error_kinds": ()})


def analyze_url(session: WizardSession) -> WizardSession:
    if session.step != WizardStep.URL_INPUT:
        return _declined(session, "analyze_url", "not_at_url_input")
    if not session.product_url.strip():
        return _declined(session, "analyze_url", "empty_url")
    try:
        result = classify(session.product_url)
    except ClassificationError as e:
        return session.model_copy(update={"error": str(e), "error_kinds": tuple(e.kinds)})
    return session.model_copy(update={
        "gender": result.gender,
        "category": result.category,
        "error": None,
        "error_kinds": (),
        "step": WizardStep.MEASUREMENTS,
    })


def find_size(session: WizardSession, chart: SizeChart) -> WizardSession:
    if not can_find_size(session):
        return _declined(session, "find_size", "precondition_failed")
    size = recommend(chart, session.gender, session.category, session.measurements, session.unit)
    return session.model_copy(update={"recommended_size": size, "step": WizardStep.RESULTS})


def advance(session: WizardSession, chart: SizeChart) -> WizardSession:
    """Move forward from the current step: start, analyze the URL, or find the size."""
    if session.step == WizardStep.INTRO:
        return start(session)
    if session.step == WizardStep.URL_INPUT:
        return analyze_url(session)
    if session.step == WizardStep.MEASUREMENTS:
        return find_size(session, chart)
    return _declined(session, "advance", "at_results")


def go_back(session: WizardSession) -> WizardSession:
    if session.step == WizardStep.INTRO:
        return session
    return session.model_copy(update={"step": WizardStep(session.step - 1)})


def set_unit(session: WizardSession, unit: str) -> WizardSession:
    if session.step != WizardStep.MEASUREMENTS:
        return _declined(session, "set_unit", "not_at_measurements")
    if unit not in ("cm", "inch"):
        return _declined(session, "set_unit", "unknown_unit")
    # entered values keep their digits and are reinterpreted in the new unit
    return session.model_copy(update={"unit": unit})


def set_measurement(session: WizardSession, dimension: str, raw: str) -> WizardSession:
    if session.step != WizardStep.MEASUREMENTS:
        return _declined(session, "set_measurement", "not_at_measurements")
    if not dimension:
        return _declined(session, "set_measurement", "empty_dimension")
    measurements = dict(session.measurements)
    if raw is None or raw == "":
        measurements.pop(dimension, None)
    else:
        measurements[dimension] = raw
    return session.model_copy(update={"measurements": measurements})


def toggle_help(session: WizardSession, dimension: str) -> WizardSession:
    if session.step != WizardStep.MEASUREMENTS:
        return _declined(session, "toggle_help", "not_at_measurements")
    active = None if session.active_help == dimension else (dimension or None)
    return session.model_copy(update={"active_help": active})


def start_over(session: WizardSession) -> WizardSession:
    # unit survives a restart
    return WizardSession(unit=session.unit)


class WizardController:
    """Owns one session and applies user actions to it.

    ``on_results`` is called with the finished session whenever an action
    moves the wizard into the results step.
    """

    def __init__(
        self,
        chart: SizeChart,
        session: WizardSession | None = None,
        on_results: Callable[[WizardSession], None] | None = None,
        include_inseam: bool = True,
        default_unit: str = "cm",
    ) -> None:
        self.chart = chart
        self.session = session or WizardSession(unit=default_unit)
        self.on_results = on_results
        self.include_inseam = include_inseam

    def _apply(self, action: str, new: WizardSession) -> WizardSession:
        old = self.session
        self.session = new
        if new is not old:
            logger.debug("wizard_action", action=action, step_from=old.step.name, step_to=new.step.name)
        if new.step == WizardStep.RESULTS and old.step != WizardStep.RESULTS and self.on_results:
            self.on_results(new)
        return new

    @property
    def dimensions(self) -> Tuple[str, ...]:
        return dimensions_for(self.session.gender, self.session.category, self.include_inseam)

    @property
    def errors(self) -> List[str]:
        return list(self.session.error_kinds)

    def start(self) -> WizardSession:
        return self._apply("start", start(self.session))

    def set_product_url(self, url: str) -> WizardSession:
        return self._apply("set_product_url", set_product_url(self.session, url))

    def advance(self) -> WizardSession:
        return self._apply("advance", advance(self.session, self.chart))

    def go_back(self) -> WizardSession:
        return self._apply("go_back", go_back(self.session))

    def set_unit(self, unit: str) -> WizardSession:
        return self._apply("set_unit", set_unit(self.session, unit))

    def set_measurement(self, dimension: str, raw: str) -> WizardSession:
        return self._apply("set_measurement", set_measurement(self.session, dimension, raw))

    def toggle_help(self, dimension: str) -> WizardSession:
        return self._apply("toggle_help", toggle_help(self.session, dimension))

    def start_over(self) -> WizardSession:
        return self._apply("start_over", start_over(self.session))
