import math
from typing import List, Mapping, Optional, Tuple

import structlog

from ..data.reference import SizeChart


logger = structlog.get_logger("sizefinder")


SIZE_NOT_FOUND = "Size not found"
CM_PER_INCH = 2.54


def to_cm(raw: object, unit: str) -> Optional[float]:
    """Parse a typed measurement and convert it to centimeters.

    Returns None for blank, non-numeric or non-finite input.
    """
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value * CM_PER_INCH if unit == "inch" else value


def score_sizes(
    chart: SizeChart,
    gender: str | None,
    category: str | None,
    measurements: Mapping[str, object],
    unit: str = "cm",
) -> List[Tuple[str, float]]:
    """Average absolute difference (cm) per size, in chart order.

    Sizes sharing no usable dimension with ``measurements`` are left out.
    """
    scores: List[Tuple[str, float]] = []
    for size, ideal in chart.table(gender, category):
        total_diff = 0.0
        measured_params = 0
        for dim, ideal_cm in ideal.items():
            if dim not in measurements:
                continue
            user_cm = to_cm(measurements[dim], unit)
            if user_cm is None:
                continue
            total_diff += abs(user_cm - ideal_cm)
            measured_params += 1
        if measured_params > 0:
            scores.append((size, total_diff / measured_params))
    return scores


def recommend(
    chart: SizeChart,
    gender: str | None,
    category: str | None,
    measurements: Mapping[str, object],
    unit: str = "cm",
) -> str:
    best_size: Optional[str] = None
    smallest_diff = math.inf
    for size, avg_diff in score_sizes(chart, gender, category, measurements, unit):
        # strict: ties keep the earlier size in chart order
        if avg_diff < smallest_diff:
            smallest_diff = avg_diff
            best_size = size

    if best_size is None:
        logger.info("size_not_found", gender=gender, category=category, unit=unit, dimensions=sorted(measurements))
        return SIZE_NOT_FOUND

    logger.info("size_recommended", gender=gender, category=category, unit=unit, size=best_size, avg_diff=round(smallest_diff, 3))
    return best_size
