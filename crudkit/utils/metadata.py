"""
Ordered multimap carrying structured error details.

Mirrors the call surface of gRPC metadata so a service error can travel
to a gRPC or HTTP host without conversion:

    metadata = Metadata()
    metadata.add("email", "email must be a valid address")
    metadata.get("email")   # ["email must be a valid address"]
    metadata.get_map()      # {"email": "email must be a valid address"}
"""

from __future__ import annotations

from collections.abc import Iterator

MetadataValue = str | bytes


class Metadata:
    """Field name to list of detail values, in insertion order."""

    def __init__(self) -> None:
        self._internal_repr: dict[str, list[MetadataValue]] = {}

    def set(self, key: str, value: MetadataValue) -> None:
        """Replace every value for key with a single value."""
        self._internal_repr[key] = [value]

    def add(self, key: str, value: MetadataValue) -> None:
        """Append a value to the list for key."""
        self._internal_repr.setdefault(key, []).append(value)

    def remove(self, key: str) -> None:
        self._internal_repr.pop(key, None)

    def get(self, key: str) -> list[MetadataValue]:
        """All values for key, or an empty list."""
        return list(self._internal_repr.get(key, []))

    def get_map(self) -> dict[str, MetadataValue]:
        """Map each key to its first value."""
        return {key: values[0] for key, values in self._internal_repr.items() if values}

    def clone(self) -> Metadata:
        copy = Metadata()
        for key, values in self._internal_repr.items():
            copy._internal_repr[key] = list(values)
        return copy

    def to_dict(self) -> dict[str, list[str]]:
        """JSON-friendly rendering; bytes values are decoded as UTF-8."""
        return {
            key: [v.decode("utf-8", errors="replace") if isinstance(v, bytes) else v for v in values]
            for key, values in self._internal_repr.items()
        }

    def keys(self) -> list[str]:
        return list(self._internal_repr)

    def __len__(self) -> int:
        return len(self._internal_repr)

    def __contains__(self, key: object) -> bool:
        return key in self._internal_repr

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._internal_repr))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Metadata):
            return NotImplemented
        return self._internal_repr == other._internal_repr

    def __repr__(self) -> str:
        return f"Metadata({self._internal_repr!r})"
