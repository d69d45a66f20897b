# convex_analyzer

`convex_analyzer` is a library of building blocks for checking the `convex/`
directory of a Convex project. It provides the following pieces:

- it loads a `convex-doctor.toml` configuration;
- it detects the project and lists its source files;
- it asks git which files changed;
- it runs rules over analysis data and turns their findings into diagnostics;
- it renders those diagnostics as a terminal report or as JSON.

A `Diagnostic` (in `convex_analyzer.diagnostic`) holds these fields:

- `rule`: the rule id;
- `severity`: a `Severity` of `error`, `warning` or `info`;
- `category`: a `Category` such as Security, Performance or Client-Side;
- `message` and `help`;
- `file`, `line` and `column`.

`Category.weight()` gives each category's scoring weight. `Diagnostic.to_dict()`
gives the JSON-ready form of a diagnostic.

## Configuration

Put a `convex-doctor.toml` file in the project root. Every table in it is
optional.

```toml
[rules]
"perf/unbounded-collect" = "off"

[ignore]
files = ["convex/_generated/**", "convex/test/**"]

[ci]
fail_below = 70

[convex]
guidance_version = "v0.241.0"
strictness = "tiered"   # or "strict", "low_noise"
```

`Config.load(root)` reads this file and returns defaults when the file is
absent. If the file cannot be read or parsed, it raises `ConfigError`.
`Config.from_dict(data)` builds a configuration from a mapping you have already
parsed.

- `is_rule_enabled(rule_id)` is false only for rules set to `"off"`.
- `is_file_ignored(root, path)` matches a path against the ignore globs.
  - A bare name such as `*.ts` also matches file names in any subdirectory.
  - A directory such as `convex/helpers` covers everything below it.
- `apply_strictness(diagnostics)` returns a new list of diagnostics:
  - `tiered` leaves the list unchanged;
  - `strict` raises info findings to warnings;
  - `low_noise` drops info findings and a fixed set of noisy warnings.

## Finding the files to check

```python
from pathlib import Path

from convex_analyzer.config import Config
from convex_analyzer.project import ProjectInfo

root = Path("my-app")
config = Config.load(root)
project = ProjectInfo.detect(root)        # raises ProjectError without convex/
print(project.has_schema, project.convex_version, project.framework)

for path in project.discover_files(config):
    print(path)
```

`discover_files` walks `convex/`, skipping `_generated/`. It keeps
TypeScript and JavaScript sources only (see `is_supported_source_file`), leaves
out anything the ignore patterns match, and returns the files sorted.

## Git and project-root facts

`convex_analyzer.vcs` provides the following functions:

- `get_changed_files(root, base)` returns the files that differ from `base`,
  together with untracked files that are not ignored. It raises `GitError` when
  git is missing or the command fails, for example outside a repository.
- `normalize_file_paths(path, root)` returns the path spellings to compare with
  git output.
- `gitignore_contains(root, ".env.local")` reports whether the root
  `.gitignore` covers a name. Glob lines such as `.env*` count.
- `read_node_version(root)` reads the Node version from `convex.json`, using
  `node.version` or `nodeVersion`.
- `generated_files_modified(root)` reports whether git lists local changes
  under `convex/_generated`.

## Running rules

Rules subclass `convex_analyzer.rules.model.Rule`. Each rule has an `id` and a
`category`. It reports on one file through `check(analysis)`, or on the whole
project through `check_project(ctx)`.

The package contains these rules:

- architecture rules in `rules.architecture`: `LargeHandler`,
  `MonolithicFile`, `DuplicatedAuth`, `ActionWithoutScheduling`,
  `NoConvexError`, `MixedFunctionTypes`, `NoHelperFunctions`,
  `DeepFunctionChain`;
- client hook rules in `rules.client`: `MutationInRender`,
  `UnhandledLoadingState`, `ActionInsteadOfMutation`, `MissingConvexProvider`;
- project-level configuration rules in `rules.configuration`:
  `MissingConvexJson`, `MissingGeneratedCode`, `OutdatedNodeVersion`,
  `MissingTsconfig`, `MissingAuthConfig`.

```python
from convex_analyzer.rules.model import FileAnalysis, ProjectContext
from convex_analyzer.rules.architecture import MonolithicFile
from convex_analyzer.rules.configuration import MissingAuthConfig

analysis = FileAnalysis(file_path="convex/everything.ts", exported_function_count=12)
for diagnostic in MonolithicFile().check(analysis):
    print(diagnostic.severity, diagnostic.rule, diagnostic.message)

ctx = ProjectContext(uses_auth=True, has_auth_config=False)
print([d.rule for d in MissingAuthConfig().check_project(ctx)])
```

## Reports

`CliReporter` (in `reporter.cli`) and `JsonReporter` (in `reporter.json_output`)
both provide `format(diagnostics, score, project_name, verbose, files_scanned,
elapsed)`. The arguments are:

- `score`: any object with `value` and `label` attributes;
- `elapsed`: seconds or a `timedelta`.

`reporter.common.score_only(score)` gives just the value and a newline.

```python
from types import SimpleNamespace

from convex_analyzer.reporter.json_output import JsonReporter

score = SimpleNamespace(value=82, label="Good")
print(JsonReporter().format(diagnostics, score, "my-app", False, 12, 0.4))
```

## What this package does not do

- It does not read JavaScript or TypeScript files itself. You fill in
  `FileAnalysis` and `ProjectContext` yourself.
- It does not compute a score.
- It has no rule registry and no single entry point that runs a whole check.
- It has no command-line program.