from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from ..config import settings
from ..data.reference import Category, Gender, get_reference_data
from ..schemas.wizard import ClassifyRequest, ClassifyResponse, DimensionField, RecommendRequest, RecommendResponse
from ..security import verify_api_key
from ..services.classifier import ClassificationError, classify
from ..services.dimensions import dimensions_for
from ..services.matcher import recommend as match_size, score_sizes


router = APIRouter(tags=["recommend"], dependencies=[Depends(verify_api_key)])


def _classification_failed(e: ClassificationError) -> HTTPException:
    return HTTPException(status_code=422, detail={"error_kinds": e.kinds, "messages": e.messages})


@router.post("/classify")
async def classify_url(body: ClassifyRequest) -> ClassifyResponse:
    try:
        result = classify(body.url)
    except ClassificationError as e:
        raise _classification_failed(e)
    return ClassifyResponse(gender=result.gender, category=result.category)


@router.post("/recommend")
async def recommend(body: RecommendRequest) -> RecommendResponse:
    """Stateless one-shot recommendation.

    Gender and category come from the body, or from ``product_url`` when
    either is missing.
    """
    gender, category = body.gender, body.category
    if not gender or not category:
        if not body.product_url:
            raise HTTPException(status_code=400, detail="Provide gender and category, or product_url")
        try:
            result = classify(body.product_url)
        except ClassificationError as e:
            raise _classification_failed(e)
        gender, category = result.gender, result.category

    chart = get_reference_data().size_chart
    measurements = {k: str(v) for k, v in body.measurements.items()}
    size = match_size(chart, gender, category, measurements, body.unit)
    details = {s: round(d, 3) for s, d in score_sizes(chart, gender, category, measurements, body.unit)}

    return RecommendResponse(
        recommended_size=size,
        gender=gender,
        category=category,
        unit=body.unit,
        dimensions=list(dimensions_for(gender, category, settings.include_inseam)),
        match_details=details,
    )


@router.get("/reference/dimensions")
async def reference_dimensions(
    gender: Optional[Gender] = Query(None),
    category: Optional[Category] = Query(None),
) -> List[DimensionField]:
    reference = get_reference_data()
    out: List[DimensionField] = []
    for dim in dimensions_for(gender, category, settings.include_inseam):
        guide = reference.guide_for(dim)
        out.append(DimensionField(
            name=dim,
            title=guide.title if guide else dim,
            description=guide.description if guide else "",
        ))
    return out
