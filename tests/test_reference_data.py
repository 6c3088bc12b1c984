import json
import pytest

from sizefinder.data.reference import (
    DEFAULT_SIZE_CHARTS,
    ReferenceDataError,
    SizeChart,
    load_reference_data,
)
from sizefinder.services.matcher import recommend


def test_default_tables():
    ref = load_reference_data()
    chart = ref.size_chart
    assert chart.sizes("women", "dresses") == ["XXS", "XS", "S", "M", "L", "XL"]
    assert chart.sizes("men", "tops") == ["XS", "S", "M", "L", "XL", "XXL"]
    assert chart.table("men", "dresses") == ()
    assert ref.guide_for("inseam").title == "Inseam"
    assert ref.guide_for(None) is None


def test_chart_is_read_only():
    chart = load_reference_data().size_chart
    _, dims = chart.table("men", "tops")[0]
    with pytest.raises(TypeError):
        dims["chest"] = 1.0


def test_json_override_keeps_order(tmp_path):
    path = tmp_path / "reference.json"
    path.write_text(json.dumps({
        "size_charts": {"women": {"tops": {"L": {"bust": 99}, "S": {"bust": 87.5}, "M": {"bust": 93}}}},
    }))
    ref = load_reference_data(str(path))
    assert ref.size_chart.sizes("women", "tops") == ["L", "S", "M"]
    # missing guides section falls back to the built-in guides
    assert ref.guide_for("bust").title == "Bust"
    assert recommend(ref.size_chart, "women", "tops", {"bust": "93"}, "cm") == "M"


@pytest.mark.parametrize("payload", [
    "not json",
    json.dumps([1, 2]),
    json.dumps({"size_charts": {"men": {"tops": {"M": {"chest": "wide"}}}}}),
    json.dumps({"size_charts": {"men": {"tops": {"M": {"chest": -1}}}}}),
    json.dumps({"size_charts": {"men": ["tops"]}}),
    json.dumps({"measurement_guides": {"waist": {"title": "Waist"}}}),
])
def test_malformed_reference_data(tmp_path, payload):
    path = tmp_path / "reference.json"
    path.write_text(payload)
    with pytest.raises(ReferenceDataError):
        load_reference_data(str(path))


def test_missing_file(tmp_path):
    with pytest.raises(ReferenceDataError):
        load_reference_data(str(tmp_path / "nope.json"))


def test_from_mapping_roundtrips_defaults():
    chart = SizeChart.from_mapping(DEFAULT_SIZE_CHARTS)
    assert set(chart.pairs()) == {
        ("men", "tops"), ("men", "trousers"),
        ("women", "tops"), ("women", "dresses"), ("women", "trousers"),
    }
