"""Hierarchical section numbering for book-style homepages."""

from dataclasses import dataclass, field


@dataclass
class SectionCounter:
    """Nested section counters for the headings of one note.

    One counter per heading depth. Create a fresh counter for every note and
    only change it through ``increment``.
    """

    separator: str = "."
    _counters: list[int] = field(default_factory=list)

    @property
    def counters(self) -> tuple[int, ...]:
        return tuple(self._counters)

    def increment(self, level: int) -> str:
        """Advance the counter at ``level`` and return the section label.

        Deeper counters reset to zero. The label joins the counters from depth 0
        through ``level``, leaving out any that are zero, so a jump from depth 0
        straight to depth 2 renders as ``"1.1"`` rather than ``"1.0.1"``.
        """
        if level < 0:
            raise ValueError(f"Heading level must not be negative: {level}")

        while len(self._counters) <= level:
            self._counters.append(0)

        self._counters[level] += 1
        for deeper in range(level + 1, len(self._counters)):
            self._counters[deeper] = 0

        return self.separator.join(str(c) for c in self._counters[: level + 1] if c)
