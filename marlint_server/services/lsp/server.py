"""
pygls language server wiring.

Routes LSP notifications into a Linter session. The transport, document
synchronization and capability negotiation are pygls's; this module only
translates between pygls objects and the linter.
"""

import asyncio
from typing import List, Optional, Set

from loguru import logger
from lsprotocol import types
from pygls.lsp.server import LanguageServer

from marlint_server import __version__
from marlint_server.config.settings import LinterSettings
from marlint_server.utils.file_utils import uri_to_path

from .linter import LintDocument, Linter

SERVER_NAME = "marlint-server"
SETTINGS_SECTION = "marlint"
RETRY_ACTION = "Retry"


class PyglsClient:
    """LinterClient backed by a pygls server."""

    def __init__(self, server: "MarlintLanguageServer"):
        self.server = server
        self._prompts: Set[asyncio.Task] = set()

    def publish_diagnostics(self, uri: str, diagnostics: List[types.Diagnostic]) -> None:
        self.server.text_document_publish_diagnostics(
            types.PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
        )

    def show_error(self, message: str, retry: bool = False) -> None:
        """Show an error; retryable ones get a Retry button."""
        if not retry:
            self.server.window_show_message(
                types.ShowMessageParams(type=types.MessageType.Error, message=message)
            )
            return

        # The editor answers whenever the user clicks, so do not block validation
        task = asyncio.ensure_future(self._ask_retry(message))
        self._prompts.add(task)
        task.add_done_callback(self._prompts.discard)

    async def _ask_retry(self, message: str) -> None:
        params = types.ShowMessageRequestParams(
            type=types.MessageType.Error,
            message=message,
            actions=[types.MessageActionItem(title=RETRY_ACTION)],
        )
        choice = await self.server.window_show_message_request_async(params)
        if choice is not None and choice.title == RETRY_ACTION:
            await self.server.linter.retry()


class MarlintLanguageServer(LanguageServer):
    """Language server holding one linting session."""

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("text_document_sync_kind", types.TextDocumentSyncKind.Full)
        super().__init__(*args, **kwargs)
        self.linter = Linter(client=PyglsClient(self), documents=self.lint_documents)

    def lint_document(self, uri: str) -> LintDocument:
        doc = self.workspace.get_text_document(uri)
        return LintDocument(uri=doc.uri, text=doc.source, version=doc.version)

    def lint_documents(self) -> List[LintDocument]:
        return [self.lint_document(uri) for uri in list(self.workspace.text_documents)]


def workspace_root_from(params: types.InitializeParams) -> Optional[str]:
    """Pick the workspace root out of initialize params, newest field first."""
    if params.workspace_folders:
        path = uri_to_path(params.workspace_folders[0].uri)
        if path is not None:
            return str(path)
    if params.root_uri:
        path = uri_to_path(params.root_uri)
        if path is not None:
            return str(path)
    return params.root_path or None


def create_server() -> MarlintLanguageServer:
    """Build a language server with all marlint features registered."""
    server = MarlintLanguageServer(SERVER_NAME, __version__)

    @server.feature(types.INITIALIZE)
    def initialize(ls: MarlintLanguageServer, params: types.InitializeParams) -> None:
        settings = LinterSettings.from_client(params.initialization_options)
        ls.linter.initialize(workspace_root_from(params), settings)

    @server.feature(types.INITIALIZED)
    async def initialized(ls: MarlintLanguageServer, params: types.InitializedParams) -> None:
        await ls.linter.warm_up()

    @server.feature(types.TEXT_DOCUMENT_DID_OPEN)
    async def did_open(
        ls: MarlintLanguageServer, params: types.DidOpenTextDocumentParams
    ) -> None:
        await ls.linter.validate_single(ls.lint_document(params.text_document.uri))

    @server.feature(types.TEXT_DOCUMENT_DID_CHANGE)
    async def did_change(
        ls: MarlintLanguageServer, params: types.DidChangeTextDocumentParams
    ) -> None:
        await ls.linter.validate_single(ls.lint_document(params.text_document.uri))

    @server.feature(types.TEXT_DOCUMENT_DID_SAVE)
    async def did_save(
        ls: MarlintLanguageServer, params: types.DidSaveTextDocumentParams
    ) -> None:
        await ls.linter.validate_single(ls.lint_document(params.text_document.uri))

    @server.feature(types.TEXT_DOCUMENT_DID_CLOSE)
    def did_close(
        ls: MarlintLanguageServer, params: types.DidCloseTextDocumentParams
    ) -> None:
        ls.linter.close(params.text_document.uri)

    @server.feature(types.WORKSPACE_DID_CHANGE_WATCHED_FILES)
    async def did_change_watched_files(
        ls: MarlintLanguageServer, params: types.DidChangeWatchedFilesParams
    ) -> None:
        logger.debug(f"{len(params.changes)} watched file(s) changed")
        await ls.linter.files_changed()

    @server.feature(types.WORKSPACE_DID_CHANGE_CONFIGURATION)
    async def did_change_configuration(
        ls: MarlintLanguageServer, params: types.DidChangeConfigurationParams
    ) -> None:
        settings = params.settings
        payload = settings.get(SETTINGS_SECTION) if isinstance(settings, dict) else None
        await ls.linter.update_settings(payload)

    @server.feature(
        types.TEXT_DOCUMENT_CODE_ACTION,
        types.CodeActionOptions(code_action_kinds=[types.CodeActionKind.QuickFix]),
    )
    def code_action(
        ls: MarlintLanguageServer, params: types.CodeActionParams
    ) -> List[types.CodeAction]:
        return ls.linter.code_actions(
            params.text_document.uri, params.context.diagnostics
        )

    return server
