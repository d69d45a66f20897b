"""Rules about Convex React hooks in client code."""

from __future__ import annotations

from convex_analyzer.diagnostic import Category, Diagnostic, Severity
from convex_analyzer.rules.model import FileAnalysis, Rule


class MutationInRender(Rule):
    """Error when a ``useMutation`` result is invoked during render."""

    id = "client/mutation-in-render"
    category = Category.CLIENT_SIDE

    def check(self, analysis: FileAnalysis) -> list[Diagnostic]:
        return [
            self.diagnostic(
                Severity.ERROR,
                "`useMutation(...)` result is invoked during render",
                "Invoking mutations during render causes infinite write loops. Call the "
                "mutate function inside event handlers or useEffect.",
                analysis.file_path,
                h.line,
                h.col,
            )
            for h in analysis.convex_hook_calls
            if h.hook_name == "useMutation" and h.in_render_body
        ]


class UnhandledLoadingState(Rule):
    """Warn once per file that ``useQuery`` returns undefined while loading."""

    id = "client/unhandled-loading-state"
    category = Category.CLIENT_SIDE

    def check(self, analysis: FileAnalysis) -> list[Diagnostic]:
        first = next(
            (h for h in analysis.convex_hook_calls if h.hook_name == "useQuery"), None
        )
        if first is None:
            return []
        return [
            self.diagnostic(
                Severity.WARNING,
                "`useQuery` result may be undefined while loading",
                "The first render returns `undefined`. Always check "
                "`if (data === undefined) return <Loading />` before using query results.",
                analysis.file_path,
                first.line,
                first.col,
            )
        ]


class ActionInsteadOfMutation(Rule):
    """Note each ``useAction`` call, which a mutation might replace."""

    id = "client/action-instead-of-mutation"
    category = Category.CLIENT_SIDE

    def check(self, analysis: FileAnalysis) -> list[Diagnostic]:
        return [
            self.diagnostic(
                Severity.INFO,
                "`useAction` used — consider if `useMutation` would suffice",
                "Actions don't have transactional guarantees. If you're only "
                "reading/writing the database, `useMutation` is simpler and more reliable.",
                analysis.file_path,
                h.line,
                h.col,
            )
            for h in analysis.convex_hook_calls
            if h.hook_name == "useAction"
        ]


class MissingConvexProvider(Rule):
    """Note hooks used in a file that does not import ``ConvexProvider``."""

    id = "client/missing-convex-provider"
    category = Category.CLIENT_SIDE

    def check(self, analysis: FileAnalysis) -> list[Diagnostic]:
        if not analysis.convex_hook_calls or analysis.has_convex_provider:
            return []
        first = analysis.convex_hook_calls[0]
        return [
            self.diagnostic(
                Severity.INFO,
                "Convex hooks used — ensure ConvexProvider wraps the component tree",
                "Convex hooks require a ConvexProvider ancestor. Typically set up in "
                "your root layout.",
                analysis.file_path,
                first.line,
                first.col,
            )
        ]