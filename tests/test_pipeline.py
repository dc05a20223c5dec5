# tests/test_pipeline.py

from pathlib import Path

from spotter.models import CodepointSpan, Collections
from spotter.pipeline import annotate_text, get_annotator

CONFIG_PATH = str(Path(__file__).resolve().parents[1] / "configs" / "spotter.yaml")

TEXT = "I moved from São Paulo to New York City in 2019, rent rose 12%."


def test_annotate_basic():
    spans = annotate_text(TEXT, CONFIG_PATH)

    found = [(TEXT[s.span.first:s.span.second], s.best().collection) for s in spans]
    assert found == [
        ("São Paulo", "place"),
        ("New York City", "place"),
        ("2019", Collections.NUMBER),
        ("12%", Collections.PERCENTAGE),
    ]

    city = spans[1].best()
    assert city.entity_data == {"kind": "city", "country": "US"}
    assert spans[2].best().numeric_value == 2019


def test_annotate_filters_collections():
    spans = annotate_text(TEXT, CONFIG_PATH, allowed_collections=[Collections.PERCENTAGE])
    assert len(spans) == 1
    assert spans[0].best().numeric_value == 12


def test_classify_selection():
    annotator = get_annotator(CONFIG_PATH)

    start = TEXT.index("New York")
    result = annotator.classify(TEXT, CodepointSpan(start, start + len("New York")))
    assert result.collection == "place"
    assert result.entity_data["kind"] == "state_or_city"

    start = TEXT.index("12%")
    result = annotator.classify(TEXT, CodepointSpan(start, start + 3))
    assert result.collection == Collections.PERCENTAGE

    assert annotator.classify(TEXT, CodepointSpan(0, 7)) is None
