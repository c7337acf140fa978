"""
LSP bridge to the external marlint linting module.

Main Components:
- WorkspacePackage: Reads dependency declarations from package.json
- ModuleResolver: Finds, loads and caches the linting module per workspace
- Linter: Validates documents and publishes diagnostics for one session
- create_server: pygls language server with all features registered
- LinterErrorType: Typed errors for better error handling

Usage:
    from marlint_server.services.lsp import create_server

    create_server().start_io()
"""

from .diagnostics import QuickFix, problem_to_diagnostic, translate_report
from .error_tracker import ErrorMessageTracker
from .exceptions import LinterErrorType, ModuleInitError
from .linter import LintDocument, Linter, ValidationResult, ValidationStatus
from .module_resolver import ModuleResolver, ResolutionState
from .package import WorkspacePackage, is_dependency
from .server import MarlintLanguageServer, create_server

__all__ = [
    "create_server",
    "MarlintLanguageServer",
    "Linter",
    "LintDocument",
    "ValidationResult",
    "ValidationStatus",
    "ModuleResolver",
    "ResolutionState",
    "WorkspacePackage",
    "is_dependency",
    "ErrorMessageTracker",
    "LinterErrorType",
    "ModuleInitError",
    "QuickFix",
    "problem_to_diagnostic",
    "translate_report",
]
