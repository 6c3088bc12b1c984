"""Reference size charts and measurement guides.

Charts are stored as ordered ``(label, dimensions)`` pairs per gender and
category. The order is the tie-break order used by the matcher, so it is kept
exactly as supplied (insertion order of the source mapping or JSON object).
"""
import json
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Dict, List, Literal, Mapping, Tuple

from pydantic import BaseModel

from ..config import settings


Gender = Literal["men", "women"]
Category = Literal["tops", "trousers", "dresses"]
Unit = Literal["cm", "inch"]

DimensionSet = Mapping[str, float]
SizeTable = Tuple[Tuple[str, DimensionSet], ...]


class ReferenceDataError(ValueError):
    pass


class MeasurementGuide(BaseModel):
    title: str
    description: str
    video: str | None = None


class SizeChart:
    """Read-only gender -> category -> ordered size table."""

    def __init__(self, tables: Dict[Tuple[str, str], SizeTable]) -> None:
        self._tables = dict(tables)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Mapping[str, Mapping[str, Mapping[str, Any]]]]) -> "SizeChart":
        tables: Dict[Tuple[str, str], SizeTable] = {}
        for gender, categories in raw.items():
            if not isinstance(categories, Mapping):
                raise ReferenceDataError(f"size chart for '{gender}' must be an object of categories")
            for category, sizes in categories.items():
                if not isinstance(sizes, Mapping):
                    raise ReferenceDataError(f"size chart for '{gender}/{category}' must be an object of sizes")
                rows: List[Tuple[str, DimensionSet]] = []
                for label, dims in sizes.items():
                    try:
                        values = {k: float(v) for k, v in dims.items()}
                    except (AttributeError, TypeError, ValueError):
                        raise ReferenceDataError(f"size '{label}' in '{gender}/{category}' must map dimensions to numbers")
                    if any(v <= 0 for v in values.values()):
                        raise ReferenceDataError(f"size '{label}' in '{gender}/{category}' has a non-positive dimension")
                    rows.append((str(label), MappingProxyType(values)))
                tables[(gender, category)] = tuple(rows)
        return cls(tables)

    def table(self, gender: str | None, category: str | None) -> SizeTable:
        if not gender or not category:
            return ()
        return self._tables.get((gender, category), ())

    def sizes(self, gender: str | None, category: str | None) -> List[str]:
        return [label for label, _ in self.table(gender, category)]

    def pairs(self) -> List[Tuple[str, str]]:
        return list(self._tables)


class ReferenceData(BaseModel):
    model_config = {"arbitrary_types_allowed": True}

    size_chart: SizeChart
    guides: Dict[str, MeasurementGuide]

    def guide_for(self, dimension: str | None) -> MeasurementGuide | None:
        if not dimension:
            return None
        return self.guides.get(dimension)


DEFAULT_SIZE_CHARTS: Dict[str, Dict[str, Dict[str, Dict[str, float]]]] = {
    "men": {
        "tops": {
            "XS": {"shoulder": 42.5, "chest": 90, "waist": 78, "neck": 37},
            "S": {"shoulder": 44, "chest": 94, "waist": 82, "neck": 39},
            "M": {"shoulder": 45.5, "chest": 98, "waist": 86, "neck": 41},
            "L": {"shoulder": 47, "chest": 103, "waist": 91, "neck": 43},
            "XL": {"shoulder": 49, "chest": 109, "waist": 97, "neck": 45},
            "XXL": {"shoulder": 51, "chest": 115, "waist": 103, "neck": 46.5},
        },
        "trousers": {
            "XS": {"waist": 72.5, "hips": 88.5, "thigh": 48, "inseam": 79},
            "S": {"waist": 77.5, "hips": 93.5, "thigh": 52, "inseam": 81},
            "M": {"waist": 82.5, "hips": 98.5, "thigh": 56, "inseam": 83},
            "L": {"waist": 87.5, "hips": 103.5, "thigh": 60, "inseam": 85},
            "XL": {"waist": 93.5, "hips": 109.5, "thigh": 64, "inseam": 87},
            "XXL": {"waist": 98.5, "hips": 114.5, "thigh": 66, "inseam": 89},
        },
    },
    "women": {
        "tops": {
            "XXS": {"shoulder": 35.5, "bust": 77.5, "waist": 60.5, "neck": 33},
            "XS": {"shoulder": 37, "bust": 82.5, "waist": 65.5, "neck": 35},
            "S": {"shoulder": 38.5, "bust": 87.5, "waist": 70.5, "neck": 37},
            "M": {"shoulder": 40, "bust": 93, "waist": 76, "neck": 39},
            "L": {"shoulder": 41.5, "bust": 99, "waist": 82, "neck": 41},
            "XL": {"shoulder": 43, "bust": 105, "waist": 88, "neck": 43},
        },
        "dresses": {
            "XXS": {"bust": 77.5, "waist": 60.5, "hips": 86.5, "length": 92.5},
            "XS": {"bust": 82.5, "waist": 65.5, "hips": 91.5, "length": 97.5},
            "S": {"bust": 87.5, "waist": 70.5, "hips": 96.5, "length": 102.5},
            "M": {"bust": 93, "waist": 76, "hips": 102, "length": 107.5},
            "L": {"bust": 99, "waist": 82, "hips": 108, "length": 112.5},
            "XL": {"bust": 105, "waist": 88, "hips": 114, "length": 117.5},
        },
        "trousers": {
            "XXS": {"waist": 61.5, "hips": 87.5, "thigh": 50.5, "inseam": 76},
            "XS": {"waist": 64, "hips": 90, "thigh": 51.5, "inseam": 78},
            "S": {"waist": 66.5, "hips": 92.5, "thigh": 52.5, "inseam": 80},
            "M": {"waist": 69, "hips": 95, "thigh": 53.5, "inseam": 82},
            "L": {"waist": 71.5, "hips": 97.5, "thigh": 54.5, "inseam": 84},
            "XL": {"waist": 74, "hips": 100, "thigh": 55.5, "inseam": 86},
        },
    },
}

DEFAULT_MEASUREMENT_GUIDES: Dict[str, Dict[str, str]] = {
    "shoulder": {"title": "Shoulder Width", "description": "Measure across your back from shoulder bone to shoulder bone"},
    "chest": {"title": "Chest", "description": "Measure around the fullest part of your chest, under your arms"},
    "bust": {"title": "Bust", "description": "Measure around the fullest part of your bust"},
    "waist": {"title": "Waist", "description": "Measure around your natural waistline"},
    "neck": {"title": "Neck", "description": "Measure around the base of your neck"},
    "hips": {"title": "Hips", "description": "Measure around the fullest part of your hips"},
    "thigh": {"title": "Thigh", "description": "Measure around the fullest part of your thigh"},
    "inseam": {"title": "Inseam", "description": "Measure from your crotch to the bottom of your ankle"},
    "length": {"title": "Length", "description": "Measure from the shoulder to the desired hemline"},
}


def build_reference_data(size_charts: Mapping[str, Any], guides: Mapping[str, Any]) -> ReferenceData:
    try:
        parsed_guides = {k: MeasurementGuide(**v) for k, v in guides.items()}
    except (TypeError, ValueError) as e:
        raise ReferenceDataError(f"invalid measurement guide: {e}")
    return ReferenceData(size_chart=SizeChart.from_mapping(size_charts), guides=parsed_guides)


def load_reference_data(path: str | None = None) -> ReferenceData:
    """Build reference data from a JSON file, or the built-in tables when no path is given.

    The file holds ``{"size_charts": {...}, "measurement_guides": {...}}``; a
    missing section falls back to the built-in one.
    """
    if not path:
        return build_reference_data(DEFAULT_SIZE_CHARTS, DEFAULT_MEASUREMENT_GUIDES)
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ReferenceDataError(f"cannot read reference data from {path}: {e}")
    if not isinstance(raw, dict):
        raise ReferenceDataError("reference data must be a JSON object")
    return build_reference_data(
        raw.get("size_charts") or DEFAULT_SIZE_CHARTS,
        raw.get("measurement_guides") or DEFAULT_MEASUREMENT_GUIDES,
    )


@lru_cache(maxsize=1)
def get_reference_data() -> ReferenceData:
    return load_reference_data(settings.reference_path)
