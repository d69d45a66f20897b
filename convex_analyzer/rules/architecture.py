"""Rules about how Convex functions and files are organised."""

from __future__ import annotations

import string

from convex_analyzer.diagnostic import Category, Diagnostic, Severity
from convex_analyzer.rules.model import CtxCall, FileAnalysis, Rule

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)

_NON_SIMPLE_HINTS = (
    "cache",
    "cached",
    "helper",
    "util",
    "service",
    "sync",
    "backfill",
    "batch",
    "process",
)

_CRUD_PREFIXES = (
    "get",
    "list",
    "create",
    "update",
    "delete",
    "remove",
    "upsert",
    "insert",
    "find",
    "fetch",
)

_CHUNK_KEYWORDS = ("sync", "backfill", "migrate", "reconcile", "reindex", "drain")


def _ascii_lower(text: str) -> str:
    return text.translate(_ASCII_LOWER)


def is_crud_like_name(name: str) -> bool:
    """Whether a function name looks like a plain CRUD operation."""
    normalized = _ascii_lower(name).lstrip("_")
    if not normalized:
        return False
    if any(token in normalized for token in _NON_SIMPLE_HINTS):
        return False
    return normalized.startswith(_CRUD_PREFIXES)


def is_chunked_processing_action(name: str) -> bool:
    """Whether an action name suggests chunked batch processing."""
    normalized = _ascii_lower(name)
    if not normalized:
        return False
    return any(keyword in normalized for keyword in _CHUNK_KEYWORDS)


class LargeHandler(Rule):
    """Warn about handlers longer than 50 lines."""

    id = "arch/large-handler"
    category = Category.ARCHITECTURE

    def check(self, analysis: FileAnalysis) -> list[Diagnostic]:
        return [
            self.diagnostic(
                Severity.WARNING,
                f"Handler `{f.name}` is {f.handler_line_count} lines long",
                "Extract logic into helper functions. Keep handlers focused on "
                "validation, auth, and orchestration.",
                analysis.file_path,
                f.span_line,
                f.span_col,
            )
            for f in analysis.functions
            if f.handler_line_count > 50
        ]


class MonolithicFile(Rule):
    """Warn about files exporting more than 10 functions."""

    id = "arch/monolithic-file"
    category = Category.ARCHITECTURE

    def check(self, analysis: FileAnalysis) -> list[Diagnostic]:
        if analysis.exported_function_count <= 10:
            return []
        return [
            self.diagnostic(
                Severity.WARNING,
                f"File has {analysis.exported_function_count} exported functions",
                "Split into smaller files organized by feature.",
                analysis.file_path,
                1,
                1,
            )
        ]


class DuplicatedAuth(Rule):
    """Warn when three or more functions in a file repeat inline auth checks."""

    id = "arch/duplicated-auth"
    category = Category.ARCHITECTURE

    def check(self, analysis: FileAnalysis) -> list[Diagnostic]:
        count = sum(1 for f in analysis.functions if f.has_auth_check)
        if count < 3:
            return []
        return [
            self.diagnostic(
                Severity.WARNING,
                f"{count} functions contain inline auth checks",
                "Extract authentication logic into a shared helper function to "
                "avoid copy-pasting the same auth pattern.",
                analysis.file_path,
                1,
                1,
            )
        ]


class ActionWithoutScheduling(Rule):
    """Note ``ctx.runAction`` called directly from a mutation."""

    id = "arch/action-without-scheduling"
    category = Category.ARCHITECTURE

    def check(self, analysis: FileAnalysis) -> list[Diagnostic]:
        return [
            self.diagnostic(
                Severity.INFO,
                f"`ctx.runAction` called directly from mutation `{c.chain}`",
                "If the action fails, mutation writes are still committed. Consider "
                "`ctx.scheduler.runAfter(0, ...)` to decouple the action.",
                analysis.file_path,
                c.line,
                c.col,
            )
            for c in analysis.ctx_calls
            if c.chain.startswith("ctx.runAction")
            and c.enclosing_function_kind is not None
            and c.enclosing_function_kind.is_mutation()
        ]


class NoConvexError(Rule):
    """Note generic ``throw new Error(...)`` in Convex handlers."""

    id = "arch/no-convex-error"
    category = Category.ARCHITECTURE

    def check(self, analysis: FileAnalysis) -> list[Diagnostic]:
        return [
            self.diagnostic(
                Severity.INFO,
                "`throw new Error(...)` in Convex handler",
                "Generic errors are redacted to 'Server Error' in production. Use "
                "`throw new ConvexError(...)` to send structured error data to clients.",
                analysis.file_path,
                loc.line,
                loc.col,
            )
            for loc in analysis.throw_generic_errors
        ]


class MixedFunctionTypes(Rule):
    """Note files that export both public and internal functions."""

    id = "arch/mixed-function-types"
    category = Category.ARCHITECTURE

    def check(self, analysis: FileAnalysis) -> list[Diagnostic]:
        has_public = any(f.is_public() for f in analysis.functions)
        has_internal = any(not f.is_public() for f in analysis.functions)
        if not (has_public and has_internal):
            return []
        return [
            self.diagnostic(
                Severity.INFO,
                "File exports both public and internal functions",
                "Mixing public and internal functions in the same file makes security "
                "auditing harder. Consider splitting into separate files.",
                analysis.file_path,
                1,
                1,
            )
        ]


class NoHelperFunctions(Rule):
    """Note files with several large handlers and no helper functions."""

    id = "arch/no-helper-functions"
    category = Category.ARCHITECTURE

    def check(self, analysis: FileAnalysis) -> list[Diagnostic]:
        large_count = sum(1 for f in analysis.functions if f.handler_line_count > 15)
        all_crud = bool(analysis.functions) and all(
            is_crud_like_name(f.name) for f in analysis.functions
        )
        if large_count < 3 or analysis.unexported_function_count != 0 or all_crud:
            return []
        return [
            self.diagnostic(
                Severity.INFO,
                f"{large_count} handlers with >15 lines and no helper functions",
                "Extract shared business logic into unexported helper functions to "
                "improve readability and testability.",
                analysis.file_path,
                1,
                1,
            )
        ]


class DeepFunctionChain(Rule):
    """Warn about actions making four or more ``ctx.run*`` calls."""

    id = "arch/deep-function-chain"
    category = Category.ARCHITECTURE

    def check(self, analysis: FileAnalysis) -> list[Diagnostic]:
        by_function: dict[str, list[CtxCall]] = {}
        for call in analysis.ctx_calls:
            is_action = (
                call.enclosing_function_kind is not None
                and call.enclosing_function_kind.is_action()
            )
            is_chunked = call.enclosing_function_name is not None and (
                is_chunked_processing_action(call.enclosing_function_name)
            )
            if (
                is_action
                and not call.enclosing_function_has_internal_secret
                and not is_chunked
                and call.chain.startswith(("ctx.runQuery", "ctx.runMutation"))
            ):
                key = call.enclosing_function_id or f"__anonymous__@{call.line}:{call.col}"
                by_function.setdefault(key, []).append(call)

        return [
            self.diagnostic(
                Severity.WARNING,
                f"Action `{name}` has {len(calls)} ctx.run* calls — deep function chain",
                "Each `ctx.runQuery`/`ctx.runMutation` is a separate transaction. "
                "Consider batching related operations into fewer mutations.",
                analysis.file_path,
                calls[0].line,
                calls[0].col,
            )
            for name, calls in by_function.items()
            if len(calls) >= 4
        ]