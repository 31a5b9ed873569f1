"""Value types for data that crosses the JSON boundary untouched.

Node metadata (``pre``, ``post``, ``indexes`` and any other key a document
author adds) is never interpreted; it is carried as ``NodeMetadata`` and
handed back in reports as-is.
"""

from __future__ import annotations

from typing import Mapping, TypeAlias


JSONScalar: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]
JSONObject: TypeAlias = dict[str, JSONValue]
NodeMetadata: TypeAlias = Mapping[str, JSONValue]
