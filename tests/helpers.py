"""Fakes and builders shared by the marlint-server tests."""

import json
from pathlib import Path
from typing import List, Optional, Tuple

from marlint_server.services.lsp.linter import LintDocument

# A stand-in for the marlint package: flags `undefinedVar` as no-undef and
# `let` statements without a trailing semicolon as a fixable warning.
LINT_MODULE = '''
CALLS = []


def lint_text(text, options):
    CALLS.append(dict(options))
    messages = []
    offset = 0
    for number, line in enumerate(text.split("\\n"), start=1):
        column = line.find("undefinedVar")
        if column >= 0:
            messages.append({
                "line": number,
                "column": column + 1,
                "severity": 2,
                "ruleId": "no-undef",
                "message": "'undefinedVar' is not defined.",
            })
        if line.startswith("let ") and not line.endswith(";"):
            messages.append({
                "line": number,
                "column": len(line) + 1,
                "severity": 1,
                "ruleId": "semi",
                "message": "Missing semicolon.",
                "fix": {"range": [offset + len(line), offset + len(line)], "text": ";"},
            })
        offset += len(line) + 1
    errors = sum(1 for m in messages if m["severity"] == 2)
    return {
        "errorCount": errors,
        "warningCount": len(messages) - errors,
        "results": [{
            "filePath": options["filename"],
            "errorCount": errors,
            "warningCount": len(messages) - errors,
            "messages": messages,
        }],
    }
'''

BROKEN_LINT_MODULE = '''
def lint_text(text, options):
    raise RuntimeError("parser exploded")
'''

MALFORMED_MODULE = '''
def lint(text, options):
    return {}
'''


class FakeClient:
    """Records what the linter sends to the editor."""

    def __init__(self):
        self.published: List[Tuple[str, list]] = []
        self.errors: List[Tuple[str, bool]] = []

    def publish_diagnostics(self, uri, diagnostics):
        self.published.append((uri, list(diagnostics)))

    def show_error(self, message, retry=False):
        self.errors.append((message, retry))

    def diagnostics_for(self, uri) -> Optional[list]:
        """Last diagnostics published for a URI."""
        for published_uri, diagnostics in reversed(self.published):
            if published_uri == uri:
                return diagnostics
        return None


def write_manifest(root: Path, dependencies=None, dev_dependencies=None, **extra):
    manifest = dict(extra)
    if dependencies is not None:
        manifest["dependencies"] = dependencies
    if dev_dependencies is not None:
        manifest["devDependencies"] = dev_dependencies
    (root / "package.json").write_text(json.dumps(manifest), encoding="utf-8")


def write_module(directory: Path, name: str, source: str = LINT_MODULE) -> Path:
    """Install a linting module as a package under ``directory``."""
    package_dir = directory / name
    package_dir.mkdir(parents=True, exist_ok=True)
    init_file = package_dir / "__init__.py"
    init_file.write_text(source, encoding="utf-8")
    return init_file


def make_document(root: Path, name: str, text: str) -> LintDocument:
    return LintDocument(uri=(root / name).as_uri(), text=text, version=1)
