"""Prompt/decoding strategy protocols and shared decoding helpers.

A task is served by a matched pair: the PromptStrategy declares the JSON
shape the model must answer with, the DecodingStrategy reads exactly that
shape back. Change both together.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Protocol, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.services.errors import MalformedOutputError

logger = logging.getLogger(__name__)

T_co = TypeVar("T_co", covariant=True)
R_contra = TypeVar("R_contra", contravariant=True)
M = TypeVar("M", bound=BaseModel)


class PromptStrategy(Protocol[R_contra]):
    def get_system_prompt(self) -> str: ...

    def get_user_prompt(self, req: R_contra) -> str: ...


class DecodingStrategy(Protocol[T_co]):
    def decode_response(self, content: str) -> T_co: ...


def as_utc(dt: datetime) -> datetime:
    """Naive datetimes from the model are taken as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_rfc3339(dt: datetime) -> str:
    return as_utc(dt).strftime("%Y-%m-%dT%H:%M:%SZ")


def strip_code_fences(raw: str) -> str:
    """Drop a surrounding markdown code fence (```json ... ```) if present."""
    raw = raw.strip()
    if raw.startswith("```"):
        lines = raw.split("\n")
        lines = [l for l in lines if not l.strip().startswith("```")]
        raw = "\n".join(lines).strip()
    return raw


def parse_json_document(content: str, model: type[M], what: str) -> M:
    """Parse model output into ``model``; structural failures only.

    Raises MalformedOutputError when the text is not JSON, not an object,
    or has fields of the wrong type. Domain rules are the caller's job.
    """
    raw = strip_code_fences(content or "")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning(f"Invalid JSON for {what}: {e}\nRaw: {raw[:500]}")
        raise MalformedOutputError(f"failed to parse {what}", e) from e

    if not isinstance(data, dict):
        raise MalformedOutputError(f"failed to parse {what}: expected a JSON object, got {type(data).__name__}")

    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise MalformedOutputError(f"failed to parse {what}", e) from e
