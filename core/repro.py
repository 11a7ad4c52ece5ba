# core/repro.py
import hashlib
import json
from typing import Any, Iterable, Mapping

from pydantic import BaseModel

# Row lists the engine sorts itself, with the field it sorts them by.
ORDER_INSENSITIVE_ROWS: Mapping[str, str] = {"prices": "date", "distributions": "ex_date"}


def _canonicalize(node: Any) -> Any:
    """
    Sorts price and distribution rows by date, at any depth (batch bundles
    included). The sort is stable, so duplicate dates keep their relative order
    and the last-wins rule for duplicate closes is unaffected.
    """
    if isinstance(node, dict):
        out = {}
        for key, value in node.items():
            value = _canonicalize(value)
            sort_field = ORDER_INSENSITIVE_ROWS.get(key)
            if sort_field and isinstance(value, list):
                value = sorted(value, key=lambda row: row.get(sort_field) or "")
            out[key] = value
        return out
    if isinstance(node, list):
        return [_canonicalize(item) for item in node]
    return node


def generate_canonical_hash(
    request_model: BaseModel, engine_version: str, exclude: Iterable[str] = ("calculation_id",)
) -> tuple[str, str]:
    """
    Generates a deterministic hash for a given request model and engine version.
    Fields named in `exclude` (per-request identifiers) do not affect the hash,
    and neither does the order of price or distribution rows, so two requests
    for the same inputs share a cache key.

    Returns a tuple of (input_fingerprint, calculation_hash).
    """
    payload = _canonicalize(request_model.model_dump(mode="json", exclude=set(exclude)))
    canonical_string = json.dumps(payload, sort_keys=True, ensure_ascii=False, separators=(",", ":"))

    input_fingerprint = f"sha256:{hashlib.sha256(canonical_string.encode('utf-8')).hexdigest()}"

    # The calculation_hash includes the engine version
    full_string_to_hash = canonical_string + engine_version
    calculation_hash = f"sha256:{hashlib.sha256(full_string_to_hash.encode('utf-8')).hexdigest()}"

    return input_fingerprint, calculation_hash
