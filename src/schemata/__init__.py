"""schemata: schema validation, transformation pipelines and JSON-Schema reflection."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("schemata")
except PackageNotFoundError:
    __version__ = "dev"

# Public API exports
# Schema builders live on the ``s`` namespace; node classes are importable
# from their modules for isinstance checks and subclassing.
from schemata.builders import s
from schemata.codes import IssueCode, SchemaType
from schemata.errors import ParseError, SchemaDefinitionError, ValidationIssue, format_path
from schemata.kernel.context import MISSING, RefinementContext, Symbol
from schemata.kernel.registry import SchemaRegistry, get_registry, list_named_schemas, use_registry
from schemata.kernel.reflection import ReflectionOptions
from schemata.kernel.schema import CatchInfo, Schema, SchemaMetadata
from schemata.result import Err, Ok, Result, SafeParseResult

__all__ = [
    "__version__",
    "s",
    "Schema",
    "SchemaMetadata",
    "CatchInfo",
    "IssueCode",
    "SchemaType",
    "ParseError",
    "SchemaDefinitionError",
    "ValidationIssue",
    "format_path",
    "MISSING",
    "Symbol",
    "RefinementContext",
    "SchemaRegistry",
    "get_registry",
    "use_registry",
    "list_named_schemas",
    "ReflectionOptions",
    "SafeParseResult",
    "Ok",
    "Err",
    "Result",
]
