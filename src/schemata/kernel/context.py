"""Per-run issue collection: the parse context and the sentinels it uses."""

from typing import Any, List, Optional, Sequence, Tuple

from schemata.codes import IssueCode
from schemata.errors import PathSegment, ValidationIssue


class Symbol:
    """A unique identity token (compared by identity, never by value)."""

    __slots__ = ("description",)

    def __init__(self, description: Optional[str] = None):
        self.description = description

    def __repr__(self) -> str:
        if self.description is None:
            return "Symbol()"
        return f"Symbol({self.description})"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        # Sentinels must survive copy/pickle as the same object.
        if self is MISSING:
            return "MISSING"
        return super().__reduce__()


# Stands in for an absent value (absent object key, no argument to parse()).
MISSING = Symbol("missing")


def type_name(value: Any) -> str:
    """Short, user-facing name of a value's type for issue messages."""
    if value is MISSING:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        if isinstance(value, float) and value != value:
            return "nan"
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, (set, frozenset)):
        return "set"
    if isinstance(value, Symbol):
        return "symbol"
    return type(value).__name__


class ParseContext:
    """Mutable issue accumulator threaded through one validation run.

    Created fresh by every top-level ``parse``/``safe_parse`` call and
    discarded afterwards. Nested schemas push their key or index before
    descending and pop it on the way back up, so every issue is recorded
    with its absolute path.
    """

    def __init__(self, path: Sequence[PathSegment] = ()):
        self.issues: List[ValidationIssue] = []
        self._path: List[PathSegment] = list(path)

    @property
    def path(self) -> Tuple[PathSegment, ...]:
        return tuple(self._path)

    @property
    def issue_count(self) -> int:
        return len(self.issues)

    def push_path(self, segment: PathSegment) -> None:
        self._path.append(segment)

    def pop_path(self) -> None:
        self._path.pop()

    def add_issue(
        self,
        code: IssueCode,
        message: str,
        path: Optional[Sequence[PathSegment]] = None,
        expected: Optional[str] = None,
        received: Optional[str] = None,
    ) -> None:
        """Record an issue. ``path`` is relative to the current location."""
        full_path = list(self._path)
        if path:
            full_path.extend(path)
        self.issues.append(ValidationIssue(
            code=code,
            message=message,
            path=full_path,
            expected=expected,
            received=received,
        ))

    def has_issues(self) -> bool:
        return bool(self.issues)

    def fork(self) -> "ParseContext":
        """Trial context at the same location with an empty issue list."""
        return ParseContext(self._path)

    def merge(self, other: "ParseContext") -> None:
        """Adopt the issues collected by a forked context."""
        self.issues.extend(other.issues)

    def adopt(self, issues: Sequence[ValidationIssue]) -> None:
        """Adopt issues from a nested ``ParseError``, re-rooted at the current path."""
        for issue in issues:
            self.issues.append(issue.model_copy(update={"path": list(self._path) + list(issue.path)}))


class RefinementContext:
    """Handle passed to ``super_refine``/``check`` callbacks.

    Callbacks may add any number of issues, each with its own code and a
    path relative to the refined value.
    """

    def __init__(self, ctx: ParseContext):
        self._ctx = ctx

    @property
    def path(self) -> Tuple[PathSegment, ...]:
        return self._ctx.path

    def add_issue(
        self,
        message: str,
        code: IssueCode = IssueCode.CUSTOM,
        path: Optional[Sequence[PathSegment]] = None,
        expected: Optional[str] = None,
        received: Optional[str] = None,
    ) -> None:
        self._ctx.add_issue(code, message, path=path, expected=expected, received=received)
