"""Fixed color palette used to tell planar blocks apart."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np

RGB = tuple[float, float, float]

# Paired (ColorBrewer) first, then primaries/secondaries and pastel mixes.
# Channels in [0, 1].
DEFAULT_COLORS: tuple[RGB, ...] = (
    (51 / 255.0, 160 / 255.0, 44 / 255.0),
    (166 / 255.0, 206 / 255.0, 227 / 255.0),
    (178 / 255.0, 223 / 255.0, 138 / 255.0),
    (31 / 255.0, 120 / 255.0, 180 / 255.0),
    (251 / 255.0, 154 / 255.0, 153 / 255.0),
    (227 / 255.0, 26 / 255.0, 28 / 255.0),
    (253 / 255.0, 191 / 255.0, 111 / 255.0),
    (106 / 255.0, 61 / 255.0, 154 / 255.0),
    (255 / 255.0, 127 / 255.0, 0 / 255.0),
    (202 / 255.0, 178 / 255.0, 214 / 255.0),
    (1.0, 0.0, 0.0),
    (0.0, 1.0, 0.0),
    (0.0, 0.0, 1.0),
    (1.0, 1.0, 0.0),
    (1.0, 0.0, 1.0),
    (0.0, 1.0, 1.0),
    (0.5, 1.0, 0.0),
    (1.0, 0.5, 0.0),
    (0.5, 0.0, 1.0),
    (1.0, 0.0, 0.5),
    (0.0, 0.5, 1.0),
    (0.0, 1.0, 0.5),
    (1.0, 0.5, 0.5),
    (0.5, 1.0, 0.5),
    (0.5, 0.5, 1.0),
    (0.5, 0.5, 1.0),
    (0.5, 1.0, 0.5),
    (0.5, 0.5, 1.0),
)


class ColorPalette:
    """Immutable ordered list of RGB colors with cyclic lookup by index."""

    __slots__ = ("_colors",)

    def __init__(self, colors: Iterable[Sequence[float]] = DEFAULT_COLORS):
        parsed: list[RGB] = []
        for color in colors:
            if len(color) != 3:
                raise ValueError(f"Palette entries must be RGB triples, got {color!r}")
            r, g, b = (float(c) for c in color)
            if not all(0.0 <= c <= 1.0 for c in (r, g, b)):
                raise ValueError(f"Palette channels must lie in [0, 1], got {color!r}")
            parsed.append((r, g, b))
        if not parsed:
            raise ValueError("Palette needs at least one color")
        self._colors: tuple[RGB, ...] = tuple(parsed)

    def __len__(self) -> int:
        return len(self._colors)

    def __iter__(self):
        return iter(self._colors)

    def __repr__(self) -> str:
        return f"ColorPalette(size={len(self._colors)})"

    def color_for(self, index: int) -> RGB:
        """Color of the ``index``-th item; wraps around every ``len(self)`` items."""
        if index < 0:
            raise ValueError(f"Color index must be non-negative, got {index}")
        return self._colors[index % len(self._colors)]

    def color_for_255(self, index: int) -> np.ndarray:
        """Color of the ``index``-th item scaled to 0-255 as uint8."""
        return np.rint(np.asarray(self.color_for(index)) * 255.0).astype(np.uint8)
