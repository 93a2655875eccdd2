"""
Composite keys for memoized calls: caller key + compact JSON of the params.
"""

import json
from typing import Any, Sequence

from .errors import InvalidParams


def encode_params(params: Sequence[Any]) -> str:
    try:
        return json.dumps(list(params), separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise InvalidParams(f"params are not JSON-encodable: {exc}") from exc


def composite_key(key: str, params: Sequence[Any]) -> str:
    return key + encode_params(params)
