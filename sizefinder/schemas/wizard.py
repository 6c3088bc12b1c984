from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from ..data.reference import Category, Gender, Unit


class UrlBody(BaseModel):
    url: str = Field("", description="Product page URL")


class UnitBody(BaseModel):
    unit: Unit


class MeasurementBody(BaseModel):
    value: str = Field("", description="Raw value as typed; empty clears the field")


class DimensionField(BaseModel):
    name: str
    title: str
    description: str
    value: str = ""


class HelpPanel(BaseModel):
    dimension: str
    title: str
    description: str
    video: Optional[str] = None


class SessionView(BaseModel):
    session_id: str
    step: str
    step_index: int
    gender: Optional[str] = None
    category: Optional[str] = None
    unit: str
    product_url: str = ""
    measurements: Dict[str, str] = Field(default_factory=dict)
    dimensions: List[DimensionField] = Field(default_factory=list)
    active_help: Optional[HelpPanel] = None
    recommended_size: Optional[str] = None
    error: Optional[str] = None
    error_kinds: List[str] = Field(default_factory=list)
    can_advance: bool = False


class ClassifyRequest(BaseModel):
    url: str


class ClassifyResponse(BaseModel):
    gender: Gender
    category: Category


class RecommendRequest(BaseModel):
    gender: Optional[Gender] = None
    category: Optional[Category] = None
    product_url: Optional[str] = None
    measurements: Dict[str, str | float] = Field(default_factory=dict)
    unit: Unit = "cm"


class RecommendResponse(BaseModel):
    recommended_size: str
    gender: Gender
    category: Category
    unit: Unit
    dimensions: List[str]
    match_details: Dict[str, float]
