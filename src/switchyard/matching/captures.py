"""Match results.

``Captures`` is a read-only mapping of capture name to matched text.
Unnamed captures (``{}``, ``{*}``, ``{3}``) are left out of the mapping
but kept, in match order, in ``positional``, the view tuple-like route
layouts bind from.
"""

from collections.abc import Iterator, Mapping, Sequence


class Captures(Mapping[str, str]):
    """Captured substrings of one successful match."""

    __slots__ = ("_entries", "_named")

    def __init__(self, entries: Sequence[tuple[str | None, str]] = ()) -> None:
        self._entries: tuple[tuple[str | None, str], ...] = tuple(entries)
        self._named: dict[str, str] = {
            name: value for name, value in self._entries if name is not None
        }

    @property
    def entries(self) -> tuple[tuple[str | None, str], ...]:
        """Every capture as ``(name or None, text)``, in match order."""
        return self._entries

    @property
    def positional(self) -> tuple[str, ...]:
        """Every captured text, named or not, in match order."""
        return tuple(value for _, value in self._entries)

    def __getitem__(self, key: str) -> str:
        return self._named[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._named)

    def __len__(self) -> int:
        return len(self._named)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Captures):
            return self._entries == other._entries
        if isinstance(other, Mapping):
            return self._named == dict(other.items())
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        unnamed = [value for name, value in self._entries if name is None]
        if unnamed:
            return f"Captures({self._named!r}, unnamed={unnamed!r})"
        return f"Captures({self._named!r})"
