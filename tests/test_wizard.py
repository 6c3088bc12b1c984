import pytest

from sizefinder.data.reference import load_reference_data
from sizefinder.services.classifier import CATEGORY_NOT_DETECTED, GENDER_NOT_DETECTED
from sizefinder.services.matcher import SIZE_NOT_FOUND
from sizefinder.services import wizard as w
from sizefinder.services.wizard import WizardController, WizardSession, WizardStep


CHART = load_reference_data().size_chart
DRESS_URL = "https://guess.in/women/dresses/red-dress"


def _at_measurements(url: str = DRESS_URL, **kwargs) -> WizardController:
    ctl = WizardController(CHART, **kwargs)
    ctl.start()
    ctl.set_product_url(url)
    ctl.advance()
    assert ctl.session.step == WizardStep.MEASUREMENTS
    return ctl


def test_new_session_defaults():
    s = WizardSession()
    assert s.step == WizardStep.INTRO
    assert s.gender is None and s.category is None
    assert s.unit == "cm"
    assert s.measurements == {}
    assert s.recommended_size is None
    assert s.product_url == ""


def test_full_flow_women_dresses():
    results = []
    ctl = WizardController(CHART, on_results=results.append)
    ctl.advance()
    assert ctl.session.step == WizardStep.URL_INPUT

    ctl.set_product_url(DRESS_URL)
    ctl.advance()
    assert (ctl.session.gender, ctl.session.category) == ("women", "dresses")
    assert ctl.dimensions == ("bust", "waist", "hips", "length")

    ctl.set_measurement("bust", "93")
    ctl.set_measurement("waist", "76")
    ctl.set_measurement("hips", "102")
    ctl.advance()

    assert ctl.session.step == WizardStep.RESULTS
    assert ctl.session.recommended_size == "M"
    assert len(results) == 1
    assert results[0].recommended_size == "M"


def test_transitions_are_pure():
    s0 = WizardSession()
    s1 = w.start(s0)
    assert s0.step == WizardStep.INTRO
    assert s1.step == WizardStep.URL_INPUT

    s2 = w.set_product_url(s1, DRESS_URL)
    s3 = w.advance(s2, CHART)
    s4 = w.set_measurement(s3, "waist", "76")
    assert s3.measurements == {}
    assert s4.measurements == {"waist": "76"}


def test_url_step_requires_url():
    ctl = WizardController(CHART)
    ctl.start()
    before = ctl.session
    ctl.advance()
    assert ctl.session is before
    assert not w.can_advance(ctl.session)

    ctl.set_product_url("   ")
    ctl.advance()
    assert ctl.session.step == WizardStep.URL_INPUT


def test_classification_failure_keeps_state():
    ctl = WizardController(CHART)
    ctl.start()
    ctl.set_product_url("https://site/kids/shoes/red")
    ctl.advance()

    s = ctl.session
    assert s.step == WizardStep.URL_INPUT
    assert s.gender is None and s.category is None
    assert s.error_kinds == (GENDER_NOT_DETECTED, CATEGORY_NOT_DETECTED)
    assert "Could not detect gender" in s.error

    # editing the URL clears the stale error and a retry succeeds
    ctl.set_product_url("https://site/men/shirts/oxford")
    assert ctl.session.error is None
    ctl.advance()
    assert ctl.session.step == WizardStep.MEASUREMENTS
    assert (ctl.session.gender, ctl.session.category) == ("men", "tops")
    assert ctl.errors == []


def test_reclassification_failure_keeps_previous_detection():
    ctl = _at_measurements()
    ctl.go_back()
    ctl.set_product_url("https://site/women/shoes/heels")
    ctl.advance()
    assert ctl.session.step == WizardStep.URL_INPUT
    assert ctl.session.error_kinds == (CATEGORY_NOT_DETECTED,)
    assert (ctl.session.gender, ctl.session.category) == ("women", "dresses")


def test_find_size_needs_a_measurement():
    ctl = _at_measurements()
    assert not w.can_find_size(ctl.session)
    ctl.advance()
    assert ctl.session.step == WizardStep.MEASUREMENTS

    ctl.set_measurement("bust", "  ")
    assert not w.can_find_size(ctl.session)
    ctl.advance()
    assert ctl.session.step == WizardStep.MEASUREMENTS


def test_find_size_before_classification_is_declined():
    s = WizardSession(step=WizardStep.MEASUREMENTS, measurements={"waist": "80"})
    assert w.find_size(s, CHART) is s
    assert w.advance(s, CHART) is s


def test_results_even_when_size_not_found():
    ctl = _at_measurements()
    ctl.set_measurement("shoulder", "40")  # not a dress dimension
    ctl.advance()
    assert ctl.session.step == WizardStep.RESULTS
    assert ctl.session.recommended_size == SIZE_NOT_FOUND


def test_advance_at_results_is_noop():
    ctl = _at_measurements()
    ctl.set_measurement("waist", "76")
    ctl.advance()
    before = ctl.session
    ctl.advance()
    assert ctl.session is before


def test_back_keeps_data_and_floors_at_intro():
    ctl = _at_measurements()
    ctl.set_measurement("waist", "76")
    ctl.advance()

    ctl.go_back()
    assert ctl.session.step == WizardStep.MEASUREMENTS
    assert ctl.session.measurements == {"waist": "76"}
    assert ctl.session.recommended_size == "M"
    ctl.go_back()
    ctl.go_back()
    ctl.go_back()
    assert ctl.session.step == WizardStep.INTRO
    assert ctl.session.gender == "women"
    assert ctl.session.product_url == DRESS_URL


def test_recompute_after_back_is_idempotent():
    results = []
    ctl = _at_measurements(on_results=results.append)
    ctl.set_measurement("bust", "90")
    ctl.set_measurement("hips", "99")
    ctl.advance()
    first = ctl.session.recommended_size
    ctl.go_back()
    ctl.advance()
    assert ctl.session.recommended_size == first
    assert len(results) == 2


def test_blank_measurement_removes_key():
    ctl = _at_measurements()
    ctl.set_measurement("waist", "76")
    ctl.set_measurement("waist", "")
    assert "waist" not in ctl.session.measurements


def test_actions_outside_their_step_are_noops():
    ctl = WizardController(CHART)
    before = ctl.session
    ctl.set_unit("inch")
    ctl.set_measurement("waist", "80")
    ctl.toggle_help("waist")
    ctl.set_product_url(DRESS_URL)
    ctl.go_back()
    assert ctl.session == before

    ctl.start()
    ctl.start()
    assert ctl.session.step == WizardStep.URL_INPUT


def test_help_toggle():
    ctl = _at_measurements()
    ctl.toggle_help("bust")
    assert ctl.session.active_help == "bust"
    ctl.toggle_help("waist")
    assert ctl.session.active_help == "waist"
    ctl.toggle_help("waist")
    assert ctl.session.active_help is None


def test_unknown_unit_declined():
    ctl = _at_measurements()
    ctl.set_unit("mm")
    assert ctl.session.unit == "cm"


def test_three_field_trouser_variant():
    ctl = _at_measurements("https://shop/men/pants/chino", include_inseam=False)
    assert ctl.dimensions == ("waist", "hips", "thigh")


# Documented but surprising behavior, kept for compatibility with the widget.

def test_unit_switch_does_not_convert_entered_values():
    ctl = _at_measurements()
    ctl.set_measurement("bust", "93")
    ctl.set_measurement("waist", "76")
    ctl.set_measurement("hips", "102")
    ctl.set_unit("inch")

    assert ctl.session.measurements == {"bust": "93", "waist": "76", "hips": "102"}
    ctl.advance()
    # the same digits are now read as inches, so the largest size wins
    assert ctl.session.recommended_size == "XL"


def test_start_over_keeps_unit():
    ctl = _at_measurements()
    ctl.set_unit("inch")
    ctl.set_measurement("waist", "30")
    ctl.toggle_help("waist")
    ctl.advance()

    ctl.start_over()
    s = ctl.session
    assert s.step == WizardStep.INTRO
    assert s.unit == "inch"
    assert s.gender is None and s.category is None
    assert s.product_url == ""
    assert s.measurements == {}
    assert s.recommended_size is None
    assert s.active_help is None


@pytest.mark.parametrize("step", list(WizardStep))
def test_start_over_from_any_step(step):
    s = WizardSession(step=step, gender="men", category="tops", measurements={"chest": "98"})
    assert w.start_over(s) == WizardSession()
