from typing import Dict, Tuple


_TROUSERS = ("waist", "hips", "thigh", "inseam")

DIMENSIONS: Dict[Tuple[str, str], Tuple[str, ...]] = {
    ("men", "tops"): ("shoulder", "chest", "waist", "neck"),
    ("men", "trousers"): _TROUSERS,
    ("women", "tops"): ("shoulder", "bust", "waist", "neck"),
    ("women", "dresses"): ("bust", "waist", "hips", "length"),
    ("women", "trousers"): _TROUSERS,
}


def dimensions_for(gender: str | None, category: str | None, include_inseam: bool = True) -> Tuple[str, ...]:
    """Ordered measurement fields to collect for a gender/category pair.

    Empty when either side is unset or the pair has no chart.
    """
    if not gender or not category:
        return ()
    dims = DIMENSIONS.get((gender, category), ())
    if not include_inseam:
        dims = tuple(d for d in dims if d != "inseam")
    return dims
