"""
Stable string hashing — compatible with the ``hash-sum`` npm package.

Identifiers produced here end up in generated code next to ids the
bundler's own tooling computes (style scope ids, HMR record keys), so
they must match ``hash-sum`` bit for bit rather than use hashlib.
"""

from __future__ import annotations

import os

_MASK = 0xFFFFFFFF


def _to_int32(value: int) -> int:
    value &= _MASK
    return value - 0x100000000 if value & 0x80000000 else value


def _code_units(text: str) -> list[int]:
    """UTF-16 code units, as ``String.prototype.charCodeAt`` sees them."""
    data = text.encode("utf-16-le", "surrogatepass")
    return [int.from_bytes(data[i:i + 2], "little") for i in range(0, len(data), 2)]


def _fold(state: int, text: str) -> int:
    if not text:
        return state
    for unit in _code_units(text):
        state = _to_int32((state << 5) - state + unit)
    return state * -2 if state < 0 else state


def hash_sum(text: str) -> str:
    """Hash a string the way ``require('hash-sum')(text)`` does.

    Returns an (at least) 8 digit lowercase hex string.
    """
    state = _fold(_fold(_fold(0, ""), "[object String]"), "string")
    state = _fold(state, text)
    return format(state, "x").rjust(8, "0")


def gen_id(file: str, context: str, key: str = "") -> str:
    """Component id seed: hash of the context-relative file path.

    The path is prefixed with the context directory's own name so that
    two projects with the same layout still get distinct ids.
    """
    root_id = os.path.basename(os.path.normpath(context))
    relative = os.path.relpath(file, context).replace(os.sep, "/")
    return hash_sum(f"{root_id}/{relative}{key or ''}")
