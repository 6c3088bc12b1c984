"""Infer gender and product category from a product URL."""
from typing import List, Optional, Sequence, Tuple

import structlog
from pydantic import BaseModel


logger = structlog.get_logger("sizefinder")


GENDER_NOT_DETECTED = "GenderNotDetected"
CATEGORY_NOT_DETECTED = "CategoryNotDetected"

# (keywords, outcome) pairs, evaluated in order; first match wins
Rule = Tuple[Tuple[str, ...], str]

GENDER_RULES: Sequence[Rule] = (
    (("/men/", "/mens/"), "men"),
    (("/women/", "/womens/"), "women"),
)

CATEGORY_RULES: Sequence[Rule] = (
    (("/tops/", "/shirts/", "/blouses/"), "tops"),
    (("/jeans/", "/trousers/", "/pants/"), "trousers"),
    (("/dresses/", "/jumpsuits/"), "dresses"),
)

ERROR_MESSAGES = {
    GENDER_NOT_DETECTED: "Could not detect gender. URL should contain '/men/' or '/women/'.",
    CATEGORY_NOT_DETECTED: "Could not detect category. URL should contain '/tops/', '/dresses/', or '/pants/'.",
}


class Classification(BaseModel):
    gender: str
    category: str


class ClassificationError(ValueError):
    def __init__(self, kinds: List[str]) -> None:
        self.kinds = list(kinds)
        self.messages = [ERROR_MESSAGES[k] for k in self.kinds]
        super().__init__(" ".join(self.messages))


def match_rules(text: str, rules: Sequence[Rule]) -> Optional[str]:
    for keywords, outcome in rules:
        if any(k in text for k in keywords):
            return outcome
    return None


def classify(
    url: str,
    gender_rules: Sequence[Rule] = GENDER_RULES,
    category_rules: Sequence[Rule] = CATEGORY_RULES,
) -> Classification:
    """Classify ``url`` into a gender and category.

    Both rule groups are always evaluated so that every failing group is
    reported in the raised :class:`ClassificationError`.
    """
    text = (url or "").lower()
    gender = match_rules(text, gender_rules)
    category = match_rules(text, category_rules)

    errors: List[str] = []
    if gender is None:
        errors.append(GENDER_NOT_DETECTED)
    if category is None:
        errors.append(CATEGORY_NOT_DETECTED)
    if errors:
        logger.info("url_classification_failed", url=url, errors=errors)
        raise ClassificationError(errors)

    logger.debug("url_classified", url=url, gender=gender, category=category)
    return Classification(gender=gender, category=category)
