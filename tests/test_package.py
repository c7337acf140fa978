"""Tests for reading dependency declarations from package.json."""

import pytest

from marlint_server.services.lsp.exceptions import LinterErrorType
from marlint_server.services.lsp.package import WorkspacePackage, is_dependency
from tests.helpers import write_manifest


class TestIsDependency:
    def test_missing_manifest_is_not_an_error(self, workspace):
        assert is_dependency(workspace, "marlint") is False
        assert is_dependency(workspace, "anything-else") is False

    def test_missing_workspace_directory(self, tmp_path):
        assert is_dependency(tmp_path / "does-not-exist", "marlint") is False

    def test_runtime_dependency(self, workspace):
        write_manifest(workspace, dependencies={"marlint": "^2.0.0"})
        assert is_dependency(workspace, "marlint") is True

    def test_dev_dependency_only(self, workspace):
        write_manifest(workspace, dev_dependencies={"marlint": "^2.0.0"})
        assert is_dependency(workspace, "marlint") is True

    def test_undeclared_name(self, workspace):
        write_manifest(
            workspace,
            dependencies={"react": "^18.0.0"},
            dev_dependencies={"jest": "^29.0.0"},
        )
        assert is_dependency(workspace, "marlint") is False

    def test_empty_version_still_counts_as_declared(self, workspace):
        write_manifest(workspace, dev_dependencies={"marlint": ""})
        assert is_dependency(workspace, "marlint") is True

    def test_manifest_without_dependency_sections(self, workspace):
        write_manifest(workspace, name="demo", version="1.0.0")
        assert is_dependency(workspace, "marlint") is False

    def test_manifest_is_reread_on_every_check(self, workspace):
        write_manifest(workspace, dependencies={})
        assert is_dependency(workspace, "marlint") is False

        write_manifest(workspace, dev_dependencies={"marlint": "^2.0.0"})
        assert is_dependency(workspace, "marlint") is True

        (workspace / "package.json").unlink()
        assert is_dependency(workspace, "marlint") is False


class TestMalformedManifest:
    def test_invalid_json_propagates(self, workspace):
        (workspace / "package.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError) as exc_info:
            is_dependency(workspace, "marlint")
        assert exc_info.value.error_type is LinterErrorType.MANIFEST_READ_ERROR

    def test_non_object_manifest_propagates(self, workspace):
        (workspace / "package.json").write_text("[1, 2, 3]", encoding="utf-8")
        with pytest.raises(ValueError):
            is_dependency(workspace, "marlint")

    def test_unreadable_manifest_propagates(self, workspace):
        # A directory where the file should be is a read error, not absence
        (workspace / "package.json").mkdir()
        with pytest.raises(OSError):
            is_dependency(workspace, "marlint")


class TestWorkspacePackage:
    def test_dependencies_are_merged(self, workspace):
        write_manifest(
            workspace,
            dependencies={"react": "^18.0.0"},
            dev_dependencies={"marlint": "^2.0.0"},
        )
        package = WorkspacePackage(workspace)
        assert package.dependencies() == {"react": "^18.0.0", "marlint": "^2.0.0"}

    def test_manifest_path(self, workspace):
        assert WorkspacePackage(workspace).manifest_path == workspace / "package.json"
