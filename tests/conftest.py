"""Shared pytest fixtures for marlint-server tests."""

import sys
import uuid
from pathlib import Path

import pytest

from marlint_server.config.settings import reload_config
from marlint_server.services.lsp.linter import Linter
from marlint_server.services.lsp.module_resolver import ModuleResolver
from tests.helpers import FakeClient


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Point the server config at a file that does not exist, so defaults apply."""
    config_dir = tmp_path_factory.mktemp("config")
    monkeypatch.setenv("MARLINT_SERVER_CONFIG", str(config_dir / "server.json"))
    reload_config()
    yield
    reload_config()


@pytest.fixture
def module_name():
    """Unique import name per test so sys.modules never leaks between tests."""
    name = f"marlint_{uuid.uuid4().hex[:8]}"
    yield name
    for imported in [m for m in sys.modules if m == name or m.startswith(name + ".")]:
        del sys.modules[imported]


@pytest.fixture
def workspace(tmp_path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def resolver(module_name) -> ModuleResolver:
    return ModuleResolver(module_name=module_name)


@pytest.fixture
def client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def linter(client, workspace, resolver) -> Linter:
    return Linter(client=client, workspace_root=str(workspace), resolver=resolver)


