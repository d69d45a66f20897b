from convex_analyzer.diagnostic import Category, Severity
from convex_analyzer.rules.client import (
    ActionInsteadOfMutation,
    MissingConvexProvider,
    MutationInRender,
    UnhandledLoadingState,
)
from convex_analyzer.rules.model import ConvexHookCall, FileAnalysis


def _analysis(*hooks, provider=False):
    return FileAnalysis(
        file_path="test.tsx",
        convex_hook_calls=[
            ConvexHookCall(hook_name=name, line=line, col=3, in_render_body=render)
            for name, line, render in hooks
        ],
        has_convex_provider=provider,
    )


def test_mutation_in_render_not_flagged_for_normal_hook_usage():
    analysis = _analysis(("useMutation", 6, False))
    assert MutationInRender().check(analysis) == []


def test_no_mutation_no_diagnostic():
    analysis = _analysis(("useQuery", 5, True))
    assert MutationInRender().check(analysis) == []


def test_mutation_in_render_detected_and_is_error():
    analysis = _analysis(("useMutation", 1, True))
    diags = MutationInRender().check(analysis)
    assert len(diags) == 1
    assert diags[0].severity == Severity.ERROR
    assert diags[0].rule == "client/mutation-in-render"
    assert diags[0].category == Category.CLIENT_SIDE
    assert (diags[0].file, diags[0].line, diags[0].column) == ("test.tsx", 1, 3)


def test_unhandled_loading_state_detected():
    diags = UnhandledLoadingState().check(_analysis(("useQuery", 6, True)))
    assert len(diags) == 1
    assert "undefined" in diags[0].message
    assert diags[0].severity == Severity.WARNING
    assert diags[0].rule == "client/unhandled-loading-state"


def test_unhandled_loading_state_emits_only_one_at_first_query():
    analysis = _analysis(
        ("useMutation", 4, True),
        ("useQuery", 6, True),
        ("useQuery", 7, True),
        ("useQuery", 8, True),
    )
    diags = UnhandledLoadingState().check(analysis)
    assert len(diags) == 1
    assert diags[0].line == 6


def test_no_use_query_no_loading_warning():
    assert UnhandledLoadingState().check(_analysis(("useMutation", 4, True))) == []


def test_action_instead_of_mutation_detected():
    diags = ActionInsteadOfMutation().check(_analysis(("useAction", 6, True)))
    assert len(diags) == 1
    assert "useAction" in diags[0].message
    assert diags[0].severity == Severity.INFO
    assert diags[0].rule == "client/action-instead-of-mutation"


def test_multiple_actions_multiple_diagnostics():
    analysis = _analysis(("useAction", 6, True), ("useAction", 7, True))
    diags = ActionInsteadOfMutation().check(analysis)
    assert [d.line for d in diags] == [6, 7]


def test_no_action_no_diagnostic():
    assert ActionInsteadOfMutation().check(_analysis(("useMutation", 5, True))) == []


def test_missing_provider_when_hooks_used():
    analysis = _analysis(("useQuery", 6, True), ("useMutation", 7, True))
    diags = MissingConvexProvider().check(analysis)
    assert len(diags) == 1
    assert "ConvexProvider" in diags[0].message
    assert diags[0].severity == Severity.INFO
    assert diags[0].line == 6
    assert diags[0].rule == "client/missing-convex-provider"


def test_no_warning_when_provider_imported():
    analysis = _analysis(("useQuery", 6, True), provider=True)
    assert MissingConvexProvider().check(analysis) == []


def test_no_warning_when_no_hooks():
    assert MissingConvexProvider().check(_analysis()) == []


def test_missing_provider_emits_single_diagnostic():
    analysis = _analysis(
        ("useQuery", 6, True), ("useMutation", 7, True), ("useAction", 8, True)
    )
    assert len(MissingConvexProvider().check(analysis)) == 1


def test_all_rules_report_client_side_category():
    analysis = _analysis(("useMutation", 1, True), ("useQuery", 2, True), ("useAction", 3, True))
    rules = [MutationInRender(), UnhandledLoadingState(), ActionInsteadOfMutation(), MissingConvexProvider()]
    diags = [d for rule in rules for d in rule.check(analysis)]
    assert len(diags) == 4
    assert {d.category for d in diags} == {Category.CLIENT_SIDE}
    assert [d.rule for d in diags] == [
        "client/mutation-in-render",
        "client/unhandled-loading-state",
        "client/action-instead-of-mutation",
        "client/missing-convex-provider",
    ]