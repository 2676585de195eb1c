"""Palette and Group: global colors plus named, ordered groups of colors."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from palcodec.core.colors import Color, ColorSpace

if TYPE_CHECKING:
    from palcodec.core.gradient import Gradient


@dataclass
class Group:
    """A named group of colors. Order is display order."""

    name: str = ''
    colors: list[Color] = field(default_factory=list)


@dataclass
class Palette:
    """Global colors plus groups.

    `format` records the coder that produced this palette (None when built
    directly). It does not take part in equality.
    """

    name: str = ''
    colors: list[Color] = field(default_factory=list)
    groups: list[Group] = field(default_factory=list)
    format: str | None = field(default=None, compare=False)

    def all_colors(self) -> list[Color]:
        """Global colors followed by every group's colors. Grouping is lost."""
        result = list(self.colors)
        for group in self.groups:
            result.extend(group.colors)
        return result

    @property
    def color_count(self) -> int:
        return len(self.colors) + sum(len(g.colors) for g in self.groups)

    def converted(self, to: ColorSpace) -> Palette:
        """Copy of this palette with every color in one colorspace."""
        return Palette(
            name=self.name,
            colors=[c.converted(to) for c in self.colors],
            groups=[Group(g.name, [c.converted(to) for c in g.colors]) for g in self.groups],
            format=self.format,
        )

    def gradient(self, name: str | None = None) -> Gradient:
        """Evenly spaced gradient from the global colors."""
        from palcodec.core.gradient import Gradient

        return Gradient.from_colors(self.colors, name=name if name is not None else self.name)
