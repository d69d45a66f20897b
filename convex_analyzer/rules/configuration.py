"""Project-level rules about Convex configuration files."""

from __future__ import annotations

import re

from convex_analyzer.diagnostic import Category, Diagnostic, Severity
from convex_analyzer.rules.model import ProjectContext, Rule

_DIGITS = re.compile(r"[0-9]+")


def parse_major_node_version(version_str: str) -> int | None:
    """The first run of digits in a version string, e.g. 18 for ``v18.2``."""
    match = _DIGITS.search(version_str)
    if match is None:
        return None
    value = int(match.group())
    return value if value < 2**32 else None


class MissingConvexJson(Rule):
    """Warn when convex.json is missing from the project root."""

    id = "config/missing-convex-json"
    category = Category.CONFIGURATION

    def check_project(self, ctx: ProjectContext) -> list[Diagnostic]:
        if ctx.has_convex_json:
            return []
        return [
            self.diagnostic(
                Severity.WARNING,
                "No convex.json found in project root",
                "Create convex.json to configure your Convex deployment settings.",
                ".",
                0,
                0,
            )
        ]


class MissingGeneratedCode(Rule):
    """Warn when convex/_generated/ is missing."""

    id = "config/missing-generated-code"
    category = Category.CONFIGURATION

    def check_project(self, ctx: ProjectContext) -> list[Diagnostic]:
        if ctx.has_generated_dir:
            return []
        return [
            self.diagnostic(
                Severity.WARNING,
                "Missing convex/_generated/ directory",
                "Run `npx convex dev` to generate type-safe API references. "
                "Consider checking in generated code per Convex recommendations.",
                "convex/",
                0,
                0,
            )
        ]


class OutdatedNodeVersion(Rule):
    """Warn when convex.json pins Node 18 or older."""

    id = "config/outdated-node-version"
    category = Category.CONFIGURATION

    def check_project(self, ctx: ProjectContext) -> list[Diagnostic]:
        if ctx.node_version_from_config is None:
            return []
        version = parse_major_node_version(ctx.node_version_from_config)
        if version is None or version > 18:
            return []
        return [
            self.diagnostic(
                Severity.WARNING,
                f"convex.json specifies Node {version} which is no longer supported",
                "Update to Node 20 or later in convex.json for continued support.",
                "convex.json",
                0,
                0,
            )
        ]


class MissingTsconfig(Rule):
    """Note a missing convex/tsconfig.json when a schema exists."""

    id = "config/missing-tsconfig"
    category = Category.CONFIGURATION

    def check_project(self, ctx: ProjectContext) -> list[Diagnostic]:
        if not ctx.has_schema or ctx.has_tsconfig:
            return []
        return [
            self.diagnostic(
                Severity.INFO,
                "No tsconfig.json found in convex/ directory",
                "Create convex/tsconfig.json for proper TypeScript type-checking "
                "during `npx convex dev`.",
                "convex/",
                0,
                0,
            )
        ]


class MissingAuthConfig(Rule):
    """Error when functions use auth but no auth config file exists."""

    id = "config/missing-auth-config"
    category = Category.CONFIGURATION

    def check_project(self, ctx: ProjectContext) -> list[Diagnostic]:
        if not ctx.uses_auth or ctx.has_auth_config:
            return []
        return [
            self.diagnostic(
                Severity.ERROR,
                "Functions use ctx.auth but no auth.config.ts found",
                "Create convex/auth.config.ts to configure authentication providers.",
                "convex/",
                0,
                0,
            )
        ]