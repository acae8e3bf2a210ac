"""
Tag array transcoding.

`expenses.tags` is a native `TEXT[]` column. asyncpg encodes a Python
`list[str]` bound to a `text[]` parameter and decodes the column back into a
list, quoting and escaping included. The codec only pins the SQL types and
normalizes what comes back:

- write: `$4::text[]` with `["food", "beverage"]`
- read:  `tags`       returning `["food", "beverage"]` (or None)
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from core.db import StoreError


class TagCodecError(StoreError):
    pass


class ArrayCodec(Protocol):
    def bind(self, placeholder: str) -> str: ...

    def column(self, name: str) -> str: ...

    def encode(self, values: Sequence[str]) -> Any: ...

    def decode(self, value: Any) -> list[str]: ...


class TextArrayCodec:
    """
    One-dimensional `text[]` through asyncpg's built-in array codec.
    """

    def bind(self, placeholder: str) -> str:
        return f"{placeholder}::text[]"

    def column(self, name: str) -> str:
        return name

    def encode(self, values: Sequence[str]) -> list[str]:
        for value in values:
            if not isinstance(value, str):
                raise TypeError(f"tag must be a string, got {type(value).__name__}")
        return list(values)

    def decode(self, value: Any) -> list[str]:
        # A NULL column means "no tags".
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            raise TagCodecError(f"unexpected tags value of type {type(value).__name__}")
        if any(v is None for v in value):
            raise TagCodecError("tags array contains a NULL element")
        if any(not isinstance(v, str) for v in value):
            raise TagCodecError("tags array contains a non-text element")
        return list(value)
