# src/review_relay/review/parser.py
import json
import logging
from pydantic import ValidationError
from review_relay.models.review import ReviewResult


logger = logging.getLogger(__name__)


def parse_review_result(raw: str) -> ReviewResult | None:
    """Parse the review service response. Returns None if it is not a usable review."""
    try:
        data = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as e:
        logger.warning(f"Review service returned non-JSON content: {e}")
        return None

    if not isinstance(data, dict):
        logger.warning(f"Review service returned {type(data).__name__}, expected an object")
        return None

    try:
        return ReviewResult.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Review service response failed validation: {e}")
        return None
