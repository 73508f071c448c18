from .json import json_dumps, json_loads

__all__ = ["json_dumps", "json_loads"]
