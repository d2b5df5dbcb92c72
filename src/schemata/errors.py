"""Structured validation issues and the errors that carry them."""

from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

from schemata.codes import IssueCode


PathSegment = Union[str, int]


class ValidationIssue(BaseModel):
    """A single validation failure.

    ``path`` addresses the failing location inside the parsed input: object
    keys are strings, array/tuple positions are ints. Several issues may share
    one path (e.g. a string failing both ``min`` and ``regex``).
    """
    code: IssueCode
    message: str
    path: List[PathSegment] = Field(default_factory=list)
    expected: Optional[str] = None
    received: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    def render(self) -> str:
        """Message suffixed with its path (``"Required at user.name"``)."""
        if not self.path:
            return self.message
        return f"{self.message} at {format_path(self.path)}"


def format_path(path: Sequence[PathSegment]) -> str:
    """Render a path as dotted keys and bracketed indices.

    Args:
        path: Sequence of key/index segments

    Returns:
        String like ``users[0].email`` (empty string for the root)
    """
    out = ""
    for segment in path:
        if isinstance(segment, int) and not isinstance(segment, bool):
            out += f"[{segment}]"
        elif out:
            out += f".{segment}"
        else:
            out = str(segment)
    return out


class ParseError(Exception):
    """Raised by ``Schema.parse`` when one or more issues were collected.

    The complete issue list is always carried, never just the first one.
    """

    def __init__(self, issues: Sequence[ValidationIssue]):
        if not issues:
            raise ValueError("ParseError requires at least one issue")
        self.issues: List[ValidationIssue] = list(issues)
        super().__init__("; ".join(issue.render() for issue in self.issues))

    def __reduce__(self):
        return (type(self), (self.issues,))

    def errors(self) -> List[Dict[str, Any]]:
        """Issues as plain dicts (wire/log form)."""
        return [issue.model_dump(mode="json", exclude_none=True) for issue in self.issues]

    def __repr__(self) -> str:
        return f"ParseError({len(self.issues)} issue(s): {self})"


class SchemaDefinitionError(ValueError):
    """Raised when a schema is constructed incorrectly (programmer error)."""
    pass
