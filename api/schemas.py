# api/schemas.py

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator


class ClassificationSchema(BaseModel):
    collection: str
    score: float
    priority_score: float
    numeric_value: Optional[int] = None
    numeric_double_value: Optional[float] = None
    entity_data: Dict[str, Any] = Field(default_factory=dict)


class AnnotatedSpanSchema(BaseModel):
    start: int
    end: int
    text: str
    classification: List[ClassificationSchema]


class AnnotateRequest(BaseModel):
    text: str
    usecase: str = "RAW"  # or "SMART"
    collections: Optional[List[str]] = None


class AnnotateResponse(BaseModel):
    spans: List[AnnotatedSpanSchema]


class ClassifyRequest(BaseModel):
    text: str
    start: int = Field(ge=0)
    end: int = Field(ge=0)
    usecase: str = "RAW"

    @model_validator(mode="after")
    def _selection_in_text(self) -> "ClassifyRequest":
        if self.start > self.end or self.end > len(self.text):
            raise ValueError("selection must satisfy 0 <= start <= end <= len(text)")
        return self


class ClassifyResponse(BaseModel):
    classification: Optional[ClassificationSchema] = None
