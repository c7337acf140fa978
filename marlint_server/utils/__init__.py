from .helpers import load_json_file

__all__ = ["load_json_file"]
