"""
Response validation at the API boundary.

The backend answers the same question in more than one shape: a bare JSON
array from one endpoint, `{"engineers": [...]}` or `{"jobs": [...]}` from
another. Rather than quietly falling back to an empty list when the shape is
unexpected, every payload is validated here and comes back as a tagged
result: `Ok(value)` or `Err(ParseError)`.
"""
from dataclasses import dataclass, field
from typing import Any, Generic, Iterable, TypeVar, Union

from pydantic import BaseModel, ValidationError

from psr_console.services.api_client import APIError, ErrorCategory

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class ParseError:
    message: str
    payload: Any = None
    details: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    error: ParseError

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self):
        raise APIError(
            self.error.message,
            status=0,
            category=ErrorCategory.RESPONSE,
            errors=self.error.details,
        )


Result = Union[Ok[T], Err]


def _describe(exc: ValidationError) -> list[str]:
    return [
        f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
        for err in exc.errors()
    ]


def validate_model(model: type[M], payload: Any, envelope_key: str | None = None) -> Result:
    """Validate a single object, optionally unwrapping `payload[envelope_key]`."""
    if envelope_key and isinstance(payload, dict) and envelope_key in payload:
        payload = payload[envelope_key]
    if not isinstance(payload, dict):
        return Err(ParseError(
            f"Expected an object for {model.__name__}, got {type(payload).__name__}",
            payload=payload,
        ))
    try:
        return Ok(model.model_validate(payload))
    except ValidationError as e:
        return Err(ParseError(
            f"Invalid {model.__name__} in response", payload=payload,
            details=_describe(e),
        ))


def validate_list(model: type[M], payload: Any, envelope_keys: Iterable[str] = ()) -> Result:
    """
    Validate a list of objects.

    Accepted shapes are a bare array, or an object carrying the array under
    one of `envelope_keys`. Anything else is an Err, never an empty list.
    """
    items = None
    if isinstance(payload, list):
        items = payload
    elif isinstance(payload, dict):
        for key in envelope_keys:
            if isinstance(payload.get(key), list):
                items = payload[key]
                break

    if items is None:
        expected = " or ".join(["array"] + [f"{{{k}: [...]}}" for k in envelope_keys])
        return Err(ParseError(
            f"Expected {expected} for {model.__name__} list",
            payload=payload,
        ))

    parsed: list[M] = []
    for index, item in enumerate(items):
        try:
            parsed.append(model.model_validate(item))
        except ValidationError as e:
            return Err(ParseError(
                f"Invalid {model.__name__} at index {index}",
                payload=item,
                details=_describe(e),
            ))
    return Ok(parsed)
