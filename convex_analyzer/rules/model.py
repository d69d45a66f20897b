"""Data gathered from analysed files and the base class for rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar

from convex_analyzer.diagnostic import Category, Diagnostic, Severity


class FunctionKind(Enum):
    """The Convex function builder a function was declared with."""

    QUERY = "query"
    MUTATION = "mutation"
    ACTION = "action"
    INTERNAL_QUERY = "internalQuery"
    INTERNAL_MUTATION = "internalMutation"
    INTERNAL_ACTION = "internalAction"
    HTTP_ACTION = "httpAction"

    @classmethod
    def from_callee(cls, name: str) -> FunctionKind | None:
        """The kind for a builder name such as ``query``, or None."""
        try:
            return cls(name)
        except ValueError:
            return None

    def is_mutation(self) -> bool:
        return self in (FunctionKind.MUTATION, FunctionKind.INTERNAL_MUTATION)

    def is_action(self) -> bool:
        return self in (FunctionKind.ACTION, FunctionKind.INTERNAL_ACTION)

    def is_public(self) -> bool:
        return self not in (
            FunctionKind.INTERNAL_QUERY,
            FunctionKind.INTERNAL_MUTATION,
            FunctionKind.INTERNAL_ACTION,
        )


@dataclass
class ConvexFunction:
    """An exported Convex function found in a file."""

    name: str
    kind: FunctionKind
    has_args_validator: bool = False
    has_any_validator_in_args: bool = False
    arg_names: list[str] = field(default_factory=list)
    has_return_validator: bool = False
    has_auth_check: bool = False
    has_internal_secret: bool = False
    is_intentionally_public: bool = False
    handler_line_count: int = 0
    span_line: int = 0
    span_col: int = 0

    def is_public(self) -> bool:
        return self.kind.is_public()


@dataclass
class CtxCall:
    """A ``ctx.*`` call chain and the function that encloses it."""

    chain: str
    line: int
    col: int
    enclosing_function_kind: FunctionKind | None = None
    enclosing_function_name: str | None = None
    enclosing_function_id: str | None = None
    enclosing_function_has_internal_secret: bool = False


@dataclass
class ConvexHookCall:
    """A call to a Convex React hook."""

    hook_name: str
    line: int
    col: int
    in_render_body: bool = False


@dataclass
class SourceLocation:
    line: int
    col: int


@dataclass
class IndexDef:
    """An index defined on a schema table."""

    table: str
    name: str
    fields: list[str] = field(default_factory=list)
    line: int = 0


@dataclass
class FilterField:
    """A field name used in a query filter."""

    field_name: str
    line: int
    col: int


@dataclass
class FileAnalysis:
    """Everything the rules need to know about one source file."""

    file_path: str = ""
    functions: list[ConvexFunction] = field(default_factory=list)
    exported_function_count: int = 0
    unexported_function_count: int = 0
    ctx_calls: list[CtxCall] = field(default_factory=list)
    convex_hook_calls: list[ConvexHookCall] = field(default_factory=list)
    has_convex_provider: bool = False
    throw_generic_errors: list[SourceLocation] = field(default_factory=list)
    index_definitions: list[IndexDef] = field(default_factory=list)
    filter_field_names: list[FilterField] = field(default_factory=list)


@dataclass
class ProjectContext:
    """Project-wide facts used by project-level rules."""

    has_schema: bool = False
    has_auth_config: bool = False
    has_convex_json: bool = False
    has_env_local: bool = False
    env_gitignored: bool = False
    uses_auth: bool = False
    has_generated_dir: bool = False
    has_tsconfig: bool = False
    node_version_from_config: str | None = None
    generated_files_modified: bool = False
    all_index_definitions: list[IndexDef] = field(default_factory=list)
    all_filter_field_names: list[FilterField] = field(default_factory=list)


class Rule:
    """A check over a file or over the whole project.

    Subclasses set ``id`` and ``category`` and override ``check`` or
    ``check_project``; both report nothing by default.
    """

    id: ClassVar[str]
    category: ClassVar[Category]

    def check(self, analysis: FileAnalysis) -> list[Diagnostic]:
        """Diagnostics for one analysed file."""
        return []

    def check_project(self, ctx: ProjectContext) -> list[Diagnostic]:
        """Diagnostics for the project as a whole."""
        return []

    def diagnostic(
        self,
        severity: Severity,
        message: str,
        help: str,
        file: str,
        line: int,
        column: int,
    ) -> Diagnostic:
        """A diagnostic attributed to this rule."""
        return Diagnostic(
            rule=self.id,
            severity=severity,
            category=self.category,
            message=message,
            help=help,
            file=file,
            line=line,
            column=column,
        )