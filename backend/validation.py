# validation.py
# raw body -> ItineraryRequest. collects every violation before failing

import base64
import json
from typing import List, Union

from pydantic import ValidationError as PydanticValidationError

from errors import ParseError, ValidationError
from models import ItineraryRequest


def decode_body(raw_body: Union[str, bytes, None], is_base64_encoded: bool = False) -> str:
    if not raw_body:
        return "{}"
    try:
        if is_base64_encoded:
            raw_body = base64.b64decode(raw_body, validate=True)
        if isinstance(raw_body, bytes):
            raw_body = raw_body.decode("utf-8")
    except ValueError as e:  # binascii.Error, UnicodeDecodeError
        raise ParseError() from e
    return raw_body if raw_body.strip() else "{}"


def _issue(loc, message: str) -> dict:
    return {"path": list(loc), "message": message}


def parse_request(raw_body: Union[str, bytes, None], is_base64_encoded: bool = False) -> ItineraryRequest:
    """
    Decode and validate a request body.
    - malformed JSON / base64 / utf-8 -> ParseError
    - schema violations (all of them) -> ValidationError with {path, message} details
    """
    text = decode_body(raw_body, is_base64_encoded)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError() from e

    issues: List[dict] = []
    req = None
    try:
        req = ItineraryRequest.model_validate(data)
    except PydanticValidationError as e:
        issues.extend(_issue(err["loc"], err["msg"]) for err in e.errors())

    # origin presence is checked on the raw payload so it is reported
    # alongside field errors
    if isinstance(data, dict) and data.get("origin") is None and data.get("zipCode") is None:
        issues.append(_issue(["origin"], "Either origin or zipCode is required"))

    if issues:
        raise ValidationError(issues)
    return req
