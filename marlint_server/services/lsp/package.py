"""
Reads dependency declarations from the workspace manifest.
"""

import json
from pathlib import Path
from typing import Dict, Union

from loguru import logger

from marlint_server.config.settings import config
from marlint_server.utils.error_utils import raiseError
from marlint_server.utils.helpers import load_json_file

from .exceptions import LinterErrorType


class WorkspacePackage:
    """Dependency view of a workspace's ``package.json``.

    The manifest is re-read on every check since the user may edit it at any
    time.
    """

    def __init__(self, workspace_root: Union[str, Path], manifest_name: str = None):
        self.workspace_root = Path(workspace_root)
        self.manifest_name = manifest_name or config.linter.manifest_name

    @property
    def manifest_path(self) -> Path:
        return self.workspace_root / self.manifest_name

    def dependencies(self) -> Dict[str, str]:
        """
        Merge ``dependencies`` and ``devDependencies`` of the manifest.

        Returns:
            Mapping of package name to version spec; empty if the manifest
            does not exist

        Raises:
            ValueError: If the manifest is not valid JSON or not a JSON object
            OSError: For any read error other than a missing file
        """
        try:
            pkg = load_json_file(self.manifest_path)
        except FileNotFoundError:
            logger.debug(f"No manifest at {self.manifest_path}")
            return {}
        except json.JSONDecodeError as e:
            raiseError(
                LinterErrorType.MANIFEST_READ_ERROR,
                f"Failed to parse {self.manifest_path}: {e}",
                ValueError,
            )

        if not isinstance(pkg, dict):
            raiseError(
                LinterErrorType.MANIFEST_READ_ERROR,
                f"Failed to parse {self.manifest_path}: expected a JSON object",
                ValueError,
            )

        merged: Dict[str, str] = {}
        for section in ("dependencies", "devDependencies"):
            deps = pkg.get(section) or {}
            if isinstance(deps, dict):
                merged.update(deps)
        return merged

    def is_dependency(self, name: str) -> bool:
        """Check whether ``name`` is declared as a runtime or dev dependency."""
        return name in self.dependencies()


def is_dependency(workspace_root: Union[str, Path], name: str) -> bool:
    """Check whether ``name`` is declared in the manifest at ``workspace_root``."""
    return WorkspacePackage(workspace_root).is_dependency(name)
