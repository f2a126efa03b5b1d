"""
Request and result models for the Nutri Scan handlers.

Field aliases match the camelCase JSON sent by the app.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.errors import RequestValidationError
from core.utils.config import DEFAULT_IMAGE_MIME_TYPE

# Returned by the model when it sees medication instead of food
MEDICINE_SENTINEL = "medicine"


class RecognitionRequest(BaseModel):
    """Body of POST /analyze."""
    model_config = ConfigDict(populate_by_name=True)

    base64_image_data: str = Field(alias="base64ImageData", min_length=1)
    supported_foods: List[str] = Field(alias="supportedFoods", min_length=1)
    mime_type: str = Field(default=DEFAULT_IMAGE_MIME_TYPE, alias="mimeType", pattern=r"^image/[\w.+-]+$")

    @field_validator("supported_foods")
    @classmethod
    def names_not_blank(cls, value: List[str]) -> List[str]:
        names = [name.strip() for name in value]
        if any(not name for name in names):
            raise ValueError("food names must be non-empty strings")
        return names


class NutritionTotals(BaseModel):
    """Aggregated nutrition of a meal. Grams unless noted."""
    model_config = ConfigDict(populate_by_name=True)

    calories: float = Field(ge=0, description="kcal")
    protein: float = Field(ge=0)
    fat: float = Field(ge=0)
    carbs: float = Field(ge=0)
    sugar: float = Field(ge=0)
    fiber: float = Field(ge=0)
    sodium: float = Field(ge=0, description="mg")
    total_weight: Optional[float] = Field(default=None, alias="totalWeight", ge=0)


class ScoreRequest(BaseModel):
    """Body of POST /get-n-score."""
    model_config = ConfigDict(populate_by_name=True)

    total_nutrition: NutritionTotals = Field(alias="totalNutrition")
    food_names: List[str] = Field(default_factory=list, alias="foodNames")


class NScoreResult(BaseModel):
    """Shape the model is asked to produce for the N-Score."""
    n_score: int = Field(alias="nScore", ge=0, le=100)
    message: str


def _describe(error: dict) -> str:
    loc = error.get("loc", ())
    location = ".".join(str(part) for part in loc) or "body"
    # An explicit null counts as absent
    if error.get("type") == "missing" or (loc and error.get("input") is None):
        return f"Missing {location} data."
    return f"Invalid {location}: {error.get('msg')}"


def parse_request(model: type, payload: Any) -> BaseModel:
    """
    Validate a parsed request body against a request model.

    Raises:
        RequestValidationError: With one readable line per problem
    """
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise RequestValidationError(" ".join(_describe(error) for error in e.errors())) from e
