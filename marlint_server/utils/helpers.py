"""Helper functions for reading workspace files."""

import json
from pathlib import Path
from typing import Any, Dict, Union


def load_json_file(file_path: Union[str, Path]) -> Dict[str, Any]:
    """Load and parse a JSON file.

    Raises FileNotFoundError when the file is missing and lets JSON decode
    errors propagate unchanged.
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
