"""The shell's own copy of the process environment."""

from __future__ import annotations

from typing import Iterable, Iterator


class Environment:
    """An ordered list of NAME=value entries."""

    def __init__(self, entries: Iterable[str] = ()) -> None:
        self._entries = list(entries)

    def _index(self, name: str) -> int | None:
        prefix = name + "="
        return next(
            (index for index, entry in enumerate(self._entries) if entry.startswith(prefix)),
            None,
        )

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._index(name) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, name: str) -> str | None:
        """The value of a variable, or None when it is not set."""
        index = self._index(name)
        if index is None:
            return None
        return self._entries[index][len(name) + 1 :]

    def update(self, name: str, value: str) -> None:
        """Replace the value of an existing variable; KeyError if it is not set."""
        index = self._index(name)
        if index is None:
            raise KeyError(name)
        self._entries[index] = f"{name}={value}"

    def set(self, name: str, value: str) -> None:
        """Set a variable, appending it when it is new."""
        if name in self:
            self.update(name, value)
        else:
            self._entries.append(f"{name}={value}")

    def unset(self, name: str) -> None:
        """Remove every entry for the variable; absent names are ignored."""
        prefix = name + "="
        self._entries = [entry for entry in self._entries if not entry.startswith(prefix)]

    def as_list(self) -> list[str]:
        """A copy of the entries in order."""
        return list(self._entries)

    def as_dict(self) -> dict[str, str]:
        """The entries as a name-to-value mapping, first entry winning."""
        result: dict[str, str] = {}
        for entry in self._entries:
            name, _, value = entry.partition("=")
            result.setdefault(name, value)
        return result