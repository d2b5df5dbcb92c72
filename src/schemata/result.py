"""Result values: the safe-parse outcome and a small Ok/Err toolkit."""

from typing import Any, Callable, Optional, Union

from pydantic import BaseModel, ConfigDict

from schemata.errors import ParseError


class SafeParseResult(BaseModel):
    """Outcome of ``Schema.safe_parse``: ``ok`` with ``data``, or ``error``."""
    ok: bool
    data: Any = None
    error: Optional[ParseError] = None

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @property
    def success(self) -> bool:
        return self.ok

    def unwrap(self) -> Any:
        """Return ``data`` or raise the carried ``ParseError``."""
        if self.ok:
            return self.data
        raise self.error

    def to_result(self) -> "Result":
        return Ok(data=self.data) if self.ok else Err(error=self.error)


class Ok(BaseModel):
    """Successful result."""
    data: Any = None

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @property
    def ok(self) -> bool:
        return True


class Err(BaseModel):
    """Failed result."""
    error: Any = None

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok, Err]


def ok(data: Any = None) -> Ok:
    return Ok(data=data)


def err(error: Any) -> Err:
    return Err(error=error)


def unwrap(result: Result) -> Any:
    """Return the data of an ``Ok``; raise (or wrap) the error of an ``Err``.

    Raises:
        BaseException: the carried error when it is an exception
        ValueError: wrapping a non-exception error value
    """
    if isinstance(result, Ok):
        return result.data
    if isinstance(result.error, BaseException):
        raise result.error
    raise ValueError(f"Called unwrap() on Err: {result.error!r}")


def map_result(result: Result, fn: Callable[[Any], Any]) -> Result:
    """Apply ``fn`` to the data of an ``Ok``; pass an ``Err`` through untouched."""
    if isinstance(result, Ok):
        return Ok(data=fn(result.data))
    return result


def flat_map(result: Result, fn: Callable[[Any], Result]) -> Result:
    """Chain a result-returning function; short-circuits on ``Err``."""
    if isinstance(result, Ok):
        return fn(result.data)
    return result


def match(result: Result, on_ok: Callable[[Any], Any], on_err: Callable[[Any], Any]) -> Any:
    if isinstance(result, Ok):
        return on_ok(result.data)
    return on_err(result.error)
