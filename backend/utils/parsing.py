import json
import re
from typing import Type, TypeVar
from pydantic import BaseModel, ValidationError

from exceptions import MalformedModelOutput

T = TypeVar("T", bound=BaseModel)

_LEADING_FENCE = re.compile(r"^```(?:json)?[ \t]*\r?\n?", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\r?\n?```$")


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences wrapping model output.

    Repeats until nothing changes, so stripping twice equals stripping once.
    """
    if not text:
        return ""

    current = text.strip()
    while True:
        stripped = _LEADING_FENCE.sub("", current, count=1)
        stripped = _TRAILING_FENCE.sub("", stripped, count=1).strip()
        if stripped == current:
            return stripped
        current = stripped


def parse_model_output(raw: str, schema: Type[T]) -> T:
    """Decode model text into ``schema`` or raise MalformedModelOutput."""
    schema_name = schema.__name__
    cleaned = strip_code_fences(raw or "")
    if not cleaned:
        raise MalformedModelOutput("empty output", raw, schema_name)

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise MalformedModelOutput(f"invalid JSON ({e.msg})", raw, schema_name) from e

    if not isinstance(data, dict):
        raise MalformedModelOutput(
            f"expected a JSON object, got {type(data).__name__}", raw, schema_name
        )

    try:
        return schema.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise MalformedModelOutput(f"schema mismatch on {fields}", raw, schema_name) from e
