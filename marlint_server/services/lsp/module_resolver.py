"""
Resolution of the external linting module for a workspace.

The ModuleResolver finds the linting module on a workspace-relative search
path, imports it, checks that it exposes the lint entry point and caches the
loaded module by its real file path. Resolution is memoized per workspace as
an asyncio task, so concurrent callers share one in-flight attempt.
"""

import asyncio
import importlib.util
import os
import sys
from enum import Enum
from importlib.machinery import ModuleSpec, PathFinder
from pathlib import Path
from types import ModuleType
from typing import Dict, List, Optional

from loguru import logger

from marlint_server.config.settings import config
from marlint_server.utils.error_utils import raiseError

from .exceptions import LinterErrorType, ModuleInitError
from .package import WorkspacePackage


class ResolutionState(Enum):
    """Lifecycle of a workspace's resolution attempt."""

    UNRESOLVED = "unresolved"
    RESOLVING = "resolving"
    RESOLVED_PRESENT = "resolved_present"
    RESOLVED_ABSENT = "resolved_absent"
    FAILED_FATAL = "failed_fatal"


class ModuleResolver:
    """
    Per-session resolver for the linting module.

    Holds two caches: resolution attempts keyed by workspace root, and loaded
    modules keyed by resolved file path. Two workspaces that resolve to the
    same file share one module object.
    """

    def __init__(
        self,
        module_name: Optional[str] = None,
        entry_point: Optional[str] = None,
        module_path: Optional[str] = None,
        global_fallback: bool = True,
    ):
        """
        Args:
            module_name: Import name of the linting module
            entry_point: Name of the callable the module must expose
            module_path: Extra directory searched before the workspace
            global_fallback: Fall back to the interpreter's sys.path when the
                workspace lookup fails
        """
        self.module_name = module_name or config.linter.module_name
        self.entry_point = entry_point or config.linter.entry_point
        self.module_path = module_path
        self.global_fallback = global_fallback

        self._attempts: Dict[str, "asyncio.Future[Optional[ModuleType]]"] = {}
        self._handles: Dict[str, ModuleType] = {}

    def set_module_path(self, module_path: Optional[str]) -> None:
        """Change the extra search directory; takes effect on the next attempt."""
        self.module_path = module_path

    async def resolve(self, workspace_root: str) -> Optional[ModuleType]:
        """
        Resolve the linting module for a workspace.

        Returns:
            The loaded module, or None when it is not installed and not
            declared as a dependency

        Raises:
            ModuleInitError: If the module is declared but missing, or loaded
                but lacks the entry point
            ValueError, OSError: If the workspace manifest cannot be read
        """
        key = self._key(workspace_root)
        attempt = self._attempts.get(key)
        if attempt is None or attempt.cancelled():
            logger.debug(f"Resolving {self.module_name} for workspace {key}")
            attempt = asyncio.ensure_future(self._resolve(key))
            self._attempts[key] = attempt

        # Shielded so one cancelled caller does not cancel the shared attempt
        return await asyncio.shield(attempt)

    def state(self, workspace_root: str) -> ResolutionState:
        """Report where the workspace's resolution attempt stands."""
        attempt = self._attempts.get(self._key(workspace_root))
        if attempt is None or attempt.cancelled():
            return ResolutionState.UNRESOLVED
        if not attempt.done():
            return ResolutionState.RESOLVING
        if attempt.exception() is not None:
            return ResolutionState.FAILED_FATAL
        if attempt.result() is None:
            return ResolutionState.RESOLVED_ABSENT
        return ResolutionState.RESOLVED_PRESENT

    def invalidate(self, workspace_root: Optional[str] = None) -> None:
        """
        Forget resolution attempts so the next resolve() starts over.

        Loaded modules stay cached; a retry that finds the same file reuses
        its module. Import finder caches are dropped so a module installed
        since the last attempt is found. In-flight attempts still settle for
        their current awaiters.

        Args:
            workspace_root: Workspace to forget, or None for all of them
        """
        if workspace_root is None:
            self._attempts.clear()
        else:
            self._attempts.pop(self._key(workspace_root), None)
        importlib.invalidate_caches()

    def reset(self) -> None:
        """Forget all attempts and all loaded modules."""
        logger.debug(f"Resetting {self.module_name} resolution state")
        self._attempts.clear()
        self._handles.clear()
        self._forget_imported()
        importlib.invalidate_caches()

    def search_paths(self, workspace_root: str) -> List[str]:
        """
        Directories searched for the module, in order.

        The configured module path comes first, then the workspace root and the
        site-packages of a ``.venv`` or ``venv`` inside it.
        """
        paths = []
        if self.module_path:
            paths.append(str(self.module_path))

        root = Path(workspace_root)
        paths.append(str(root))
        for venv in (".venv", "venv"):
            venv_dir = root / venv
            if not venv_dir.is_dir():
                continue
            paths.extend(str(p) for p in sorted(venv_dir.glob("lib/python*/site-packages")))
            windows_site = venv_dir / "Lib" / "site-packages"
            if windows_site.is_dir():
                paths.append(str(windows_site))
        return paths

    def _key(self, workspace_root: str) -> str:
        return os.path.abspath(workspace_root)

    def _forget_imported(self) -> None:
        """Drop the module and its submodules from sys.modules."""
        prefix = self.module_name + "."
        for name in [n for n in sys.modules if n == self.module_name or n.startswith(prefix)]:
            del sys.modules[name]

    def _find_spec(self, workspace_root: str) -> Optional[ModuleSpec]:
        """Locate the module without importing it."""
        spec = PathFinder.find_spec(self.module_name, self.search_paths(workspace_root))
        if spec is None and self.global_fallback:
            logger.debug(f"{self.module_name} not found in workspace, trying sys.path")
            spec = PathFinder.find_spec(self.module_name)

        # Namespace packages have no file to load or key the cache by
        if spec is None or spec.loader is None or not spec.has_location:
            return None
        return spec

    def _load(self, spec: ModuleSpec) -> ModuleType:
        """Import the module from its spec."""
        imported = sys.modules.get(spec.name)
        imported_file = getattr(imported, "__file__", None)
        if imported_file is None or os.path.realpath(imported_file) != os.path.realpath(
            spec.origin
        ):
            # Stale submodules would otherwise satisfy the new package's imports
            self._forget_imported()

        module = importlib.util.module_from_spec(spec)
        # Registered first so the package's own relative imports resolve
        sys.modules[spec.name] = module
        try:
            spec.loader.exec_module(module)
        except Exception:
            self._forget_imported()
            raise
        return module

    async def _resolve(self, workspace_root: str) -> Optional[ModuleType]:
        spec = self._find_spec(workspace_root)
        if spec is None:
            return self._module_not_found(workspace_root)

        origin = os.path.realpath(spec.origin)
        handle = self._handles.get(origin)
        if handle is not None:
            logger.debug(f"Reusing {self.module_name} loaded from {origin}")
            return handle

        try:
            module = await asyncio.to_thread(self._load, spec)
        except Exception as e:
            logger.warning(f"Failed to import {self.module_name} from {origin}: {e}")
            return self._module_not_found(workspace_root)

        if not callable(getattr(module, self.entry_point, None)):
            raiseError(
                LinterErrorType.MODULE_MALFORMED,
                f"Marlint doesn't export a {self.entry_point} function.",
                ModuleInitError,
                retry=False,
            )

        # A concurrent attempt for another workspace may have won the race
        handle = self._handles.setdefault(origin, module)
        logger.info(f"Loaded {self.module_name} from {origin}")
        return handle

    def _module_not_found(self, workspace_root: str) -> None:
        if WorkspacePackage(workspace_root).is_dependency(self.module_name):
            raiseError(
                LinterErrorType.MODULE_MISSING,
                f"Failed to load {self.module_name}. Make sure {self.module_name} "
                "is installed in your workspace folder and then press Retry.",
                ModuleInitError,
                retry=True,
            )

        logger.debug(
            f"{self.module_name} is not installed nor declared in {workspace_root}, "
            "linting disabled"
        )
        return None
