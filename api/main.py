import os
import logging
import logging.config

import yaml
from fastapi import FastAPI, HTTPException

from api.schemas import (
    AnnotateRequest,
    AnnotateResponse,
    AnnotatedSpanSchema,
    ClassificationSchema,
    ClassifyRequest,
    ClassifyResponse,
)
from spotter.models import AnnotationUsecase, ClassificationResult, CodepointSpan
from spotter.pipeline import get_annotator
from spotter.utf8 import substring_by_codepoints

CONFIG_PATH = os.environ.get("SPOTTER_CONFIG", os.path.join("configs", "spotter.yaml"))


def setup_logging():
    cfg_path = os.path.join("configs", "logging.yaml")
    if os.path.exists(cfg_path):
        try:
            with open(cfg_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
            os.makedirs("logs", exist_ok=True)
            logging.config.dictConfig(config)
        except (OSError, ValueError, yaml.YAMLError) as e:
            print(f"[logging] Failed to load logging.yaml: {e}")
            logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.INFO)


setup_logging()
logger = logging.getLogger("api")

app = FastAPI(
    title="Spotter",
    version="0.1.0",
    description="Offline number, percentage and dictionary-term annotation.",
)


def _usecase(name: str) -> AnnotationUsecase:
    try:
        return AnnotationUsecase[name.upper()]
    except KeyError:
        raise HTTPException(status_code=422, detail=f"Unknown usecase {name!r}")


def _classification_schema(c: ClassificationResult) -> ClassificationSchema:
    return ClassificationSchema(
        collection=c.collection,
        score=c.score,
        priority_score=c.priority_score,
        numeric_value=c.numeric_value,
        numeric_double_value=c.numeric_double_value,
        entity_data=c.entity_data,
    )


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.post("/annotate", response_model=AnnotateResponse)
def annotate(req: AnnotateRequest) -> AnnotateResponse:
    logger.info("Received /annotate request (%d chars)", len(req.text))
    spans = get_annotator(CONFIG_PATH).annotate(
        req.text,
        usecase=_usecase(req.usecase),
        allowed_collections=req.collections,
    )
    span_schemas = [
        AnnotatedSpanSchema(
            start=s.span.first,
            end=s.span.second,
            text=substring_by_codepoints(req.text, s.span),
            classification=[_classification_schema(c) for c in s.classification],
        )
        for s in spans
    ]
    return AnnotateResponse(spans=span_schemas)


@app.post("/classify", response_model=ClassifyResponse)
def classify(req: ClassifyRequest) -> ClassifyResponse:
    logger.info("Received /classify request [%d, %d)", req.start, req.end)
    result = get_annotator(CONFIG_PATH).classify(
        req.text, CodepointSpan(req.start, req.end), usecase=_usecase(req.usecase)
    )
    if result is None:
        return ClassifyResponse()
    return ClassifyResponse(classification=_classification_schema(result))
