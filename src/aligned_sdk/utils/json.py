import json
from typing import Any

from aligned_sdk.protocol.errors import SerializationError


def json_dumps(obj: Any) -> str:
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False)


def json_loads(s: Any) -> Any:
    try:
        return json.loads(s)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Malformed JSON message: {e}") from e
