"""Dense ranking of active automatic workflows.

Active automatic workflows are evaluated in the order of their
``sortindex``. The ranking always holds the values 1..K for K ranked
workflows, each exactly once.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Protocol


class Ranked(Protocol):
    """Anything that carries an ID and a sortindex."""

    id: int
    sortindex: int | None


class SortRanking:
    """Ordered list of ranked workflows.

    The ranking is built from a snapshot of the currently ranked
    workflows and writes the resulting positions back to their
    ``sortindex`` attribute. Every mutating method returns the entries
    whose sortindex changed, so the caller can persist exactly those.

    Example:
        >>> ranking = SortRanking(active_automatic_workflows)
        >>> changed = ranking.swap(workflow, up=True)
    """

    def __init__(self, entries: Iterable[Ranked]) -> None:
        self._entries: list[Ranked] = sorted(
            entries,
            key=lambda entry: (entry.sortindex is None, entry.sortindex or 0, entry.id),
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Ranked]:
        return iter(self._entries)

    def __contains__(self, entry: object) -> bool:
        return any(existing.id == getattr(entry, "id", None) for existing in self._entries)

    def position(self, entry: Ranked) -> int:
        """Return the 1-based position of an entry.

        Raises:
            ValueError: If the entry is not ranked.
        """
        for index, existing in enumerate(self._entries):
            if existing.id == entry.id:
                return index + 1
        raise ValueError(f"{entry!r} is not part of the ranking")

    def append(self, entry: Ranked) -> list[Ranked]:
        """Rank an entry after all others."""
        if entry in self:
            return []
        self._entries.append(entry)
        return self._renumber()

    def remove(self, entry: Ranked) -> list[Ranked]:
        """Drop an entry and close the gap it leaves.

        The removed entry's sortindex is reset to None and it is part of the
        returned list.
        """
        position = self.position(entry)
        removed = self._entries.pop(position - 1)
        removed.sortindex = None
        return [removed, *self._renumber()]

    def swap(self, entry: Ranked, up: bool) -> list[Ranked]:
        """Exchange an entry with its upper or lower neighbour.

        Moving the first entry up or the last entry down changes nothing.
        """
        position = self.position(entry)
        other = position - 1 if up else position + 1
        if other < 1 or other > len(self._entries):
            return []
        i, j = position - 1, other - 1
        self._entries[i], self._entries[j] = self._entries[j], self._entries[i]
        return self._renumber()

    def _renumber(self) -> list[Ranked]:
        changed = []
        for index, entry in enumerate(self._entries, start=1):
            if entry.sortindex != index:
                entry.sortindex = index
                changed.append(entry)
        return changed
