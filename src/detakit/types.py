"""Type aliases for detakit.

Reusable type definitions shared by Base and Drive.
"""

from typing import Any, Dict, Iterable, Union

from .schema import Record

# Record input types - flexible input for put/insert
Item = Union[Record, Dict[str, Any], str, int, float, bool, list]

# Drive file name input - single name or several
Names = Union[str, Iterable[str]]

# Blob body accepted by Drive.put
Content = Union[bytes, bytearray, memoryview, str]
