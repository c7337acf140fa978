"""
Per-session linting service.

The Linter feeds documents to the resolved linting module, publishes the
translated diagnostics through the editor client and decides which errors the
user gets to see. It carries no transport code: the language server hands it
documents and a client object.
"""

import asyncio
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Protocol

from loguru import logger
from lsprotocol import types

from marlint_server.config.settings import LinterSettings
from marlint_server.utils.file_utils import uri_to_path

from .diagnostics import QuickFix, same_problem, translate_report
from .error_tracker import ErrorMessageTracker
from .exceptions import LinterErrorType
from .module_resolver import ModuleResolver


class LinterClient(Protocol):
    """What the linter needs from the editor connection."""

    def publish_diagnostics(self, uri: str, diagnostics: List[types.Diagnostic]) -> None: ...

    def show_error(self, message: str, retry: bool = False) -> None: ...


@dataclass
class LintDocument:
    """Snapshot of an open text document."""

    uri: str
    text: str
    version: Optional[int] = None


class ValidationStatus(Enum):
    OK = "ok"
    SKIPPED = "skipped"
    STALE = "stale"
    ERROR = "error"


@dataclass
class ValidationResult:
    """Outcome of validating one document."""

    uri: str
    status: ValidationStatus
    diagnostics: List[types.Diagnostic] = field(default_factory=list)
    error: Optional[BaseException] = None
    error_type: Optional[LinterErrorType] = None


class Linter:
    """
    Linting session for one editor connection.

    Every document URI carries a sequence number bumped on each validation and
    on close. A validation publishes only while its number is current, so a
    late result never overwrites newer or cleared diagnostics.
    """

    def __init__(
        self,
        client: LinterClient,
        workspace_root: Optional[str] = None,
        settings: Optional[LinterSettings] = None,
        resolver: Optional[ModuleResolver] = None,
        documents: Optional[Callable[[], Iterable[LintDocument]]] = None,
    ):
        self.client = client
        self.workspace_root = workspace_root
        self.settings = settings or LinterSettings()
        self.resolver = resolver or ModuleResolver(module_path=self.settings.module_path)
        self._documents = documents or (lambda: [])

        self._sequence: Dict[str, int] = {}
        self._fixes: Dict[str, List[QuickFix]] = {}

    def initialize(
        self, workspace_root: Optional[str], settings: Optional[LinterSettings] = None
    ) -> None:
        """Bind the session to a workspace and the editor's initial settings."""
        self.workspace_root = workspace_root
        if settings is not None:
            self.settings = settings
            self.resolver.set_module_path(settings.module_path)
        logger.info(f"Linter session initialized for workspace {workspace_root}")

    def open_documents(self) -> List[LintDocument]:
        return list(self._documents())

    async def warm_up(self) -> None:
        """Resolve the module up front so install problems show at startup."""
        if not self.workspace_root:
            return

        try:
            await self.resolver.resolve(self.workspace_root)
        except Exception as e:
            if self._should_surface(e):
                self._mark_surfaced(e)
                self.client.show_error(
                    self._message_for(e), retry=bool(getattr(e, "retry", False))
                )

    async def validate(self, document: LintDocument) -> ValidationResult:
        """
        Lint one document and publish its diagnostics.

        Never raises: resolution failures and lint call failures come back as
        an ERROR result.
        """
        uri = document.uri
        sequence = self._next_sequence(uri)

        path = uri_to_path(uri)
        if path is None:
            logger.debug(f"Skipping non-file document {uri}")
            return ValidationResult(uri, ValidationStatus.SKIPPED)

        root = self.workspace_root or str(path.parent)

        try:
            lib = await self.resolver.resolve(root)
        except Exception as e:
            return ValidationResult(
                uri,
                ValidationStatus.ERROR,
                error=e,
                error_type=getattr(e, "error_type", LinterErrorType.MANIFEST_READ_ERROR),
            )

        if lib is None:
            return ValidationResult(uri, ValidationStatus.SKIPPED)

        # No await follows; the inline lint call cannot be superseded
        if not self._is_current(uri, sequence):
            logger.debug(f"Dropping stale validation for {uri}")
            return ValidationResult(uri, ValidationStatus.STALE)

        options = dict(self.settings.options)
        options["cwd"] = root
        options["filename"] = str(path)

        try:
            lint_text = getattr(lib, self.resolver.entry_point)
            report = lint_text(document.text, options)
            diagnostics, fixes = translate_report(
                report, document.text, show_warnings=self.settings.show_warnings
            )
        except Exception as e:
            logger.opt(exception=e).warning(f"Linting failed for {path}: {e}")
            return ValidationResult(
                uri,
                ValidationStatus.ERROR,
                error=e,
                error_type=LinterErrorType.LINT_CALL_ERROR,
            )

        self._fixes[uri] = fixes
        self.client.publish_diagnostics(uri, diagnostics)
        return ValidationResult(uri, ValidationStatus.OK, diagnostics)

    async def validate_single(self, document: LintDocument) -> ValidationResult:
        """Validate one document and show a fatal error to the user."""
        result = await self.validate(document)
        if result.status is ValidationStatus.ERROR and self._should_surface(
            result.error, result.error_type
        ):
            self._mark_surfaced(result.error)
            self.client.show_error(
                self._message_for(result.error, document),
                retry=bool(getattr(result.error, "retry", False)),
            )
        return result

    async def validate_many(
        self, documents: Optional[Iterable[LintDocument]] = None
    ) -> List[ValidationResult]:
        """
        Validate several documents, showing each distinct error message once.

        Args:
            documents: Documents to validate; all open documents by default
        """
        documents = list(self.open_documents() if documents is None else documents)
        tracker = ErrorMessageTracker()

        results = await asyncio.gather(*(self.validate(d) for d in documents))

        surfaced = []
        for document, result in zip(documents, results):
            if result.status is not ValidationStatus.ERROR:
                continue
            if not self._should_surface(result.error, result.error_type):
                continue
            tracker.add(
                self._message_for(result.error, document),
                retry=bool(getattr(result.error, "retry", False)),
            )
            surfaced.append(result.error)

        for error in surfaced:
            self._mark_surfaced(error)
        tracker.send_errors(self.client)
        return results

    def close(self, uri: str) -> None:
        """Clear a closed document's diagnostics right away."""
        self._next_sequence(uri)
        self._fixes.pop(uri, None)
        self.client.publish_diagnostics(uri, [])

    async def update_settings(self, payload: Optional[dict]) -> List[ValidationResult]:
        """
        Apply changed editor settings and revalidate with a fresh module.

        A None payload (no ``marlint`` section, or a pull-model client) keeps
        the current settings.
        """
        if payload is not None:
            self.settings = LinterSettings.from_client(payload)
        self.resolver.set_module_path(self.settings.module_path)
        self.resolver.reset()
        logger.info("Settings changed, revalidating open documents")
        return await self.validate_many()

    async def files_changed(self) -> List[ValidationResult]:
        """Watched files changed: the module may have been installed or removed."""
        self.resolver.invalidate()
        return await self.validate_many()

    async def retry(self) -> List[ValidationResult]:
        """User asked to retry after installing the module."""
        logger.info("Retrying module resolution")
        self.resolver.invalidate()
        return await self.validate_many()

    def code_actions(
        self, uri: str, diagnostics: Iterable[types.Diagnostic]
    ) -> List[types.CodeAction]:
        """Quick fixes for the requested diagnostics that the linter can fix."""
        diagnostics = list(diagnostics)
        actions = []
        for quick_fix in self._fixes.get(uri, []):
            if not any(same_problem(quick_fix.diagnostic, d) for d in diagnostics):
                continue

            title = (
                f"Fix this {quick_fix.rule_id} problem"
                if quick_fix.rule_id
                else "Fix this problem"
            )
            edit = types.TextEdit(range=quick_fix.range, new_text=quick_fix.text)
            actions.append(
                types.CodeAction(
                    title=title,
                    kind=types.CodeActionKind.QuickFix,
                    diagnostics=[quick_fix.diagnostic],
                    edit=types.WorkspaceEdit(changes={uri: [edit]}),
                )
            )
        return actions

    def _next_sequence(self, uri: str) -> int:
        self._sequence[uri] = self._sequence.get(uri, 0) + 1
        return self._sequence[uri]

    def _is_current(self, uri: str, sequence: int) -> bool:
        return self._sequence.get(uri) == sequence

    def _should_surface(
        self, error: BaseException, error_type: Optional[LinterErrorType] = None
    ) -> bool:
        # Lint call failures stay in the log; one broken file must not nag the user
        if error_type is LinterErrorType.LINT_CALL_ERROR:
            return False
        # A shared resolution failure is shown once per attempt
        return not getattr(error, "surfaced", False)

    def _mark_surfaced(self, error: BaseException) -> None:
        setattr(error, "surfaced", True)

    def _message_for(
        self, error: BaseException, document: Optional[LintDocument] = None
    ) -> str:
        message = str(error)
        if message:
            return message

        path = uri_to_path(document.uri) if document else None
        if path is not None:
            return f"An unknown error occurred while validating file: {os.fspath(path)}"
        return "An unknown error occurred while loading the linting module."
