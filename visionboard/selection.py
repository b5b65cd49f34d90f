"""
Selection Module - Dwell-Time Palette Selection
===============================================
The color palette sits in the left screen margin and the brush sizes in
the right margin. While in SELECT mode the cursor hovers an option; holding
it for DWELL_DURATION commits the option.
"""

import math
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Optional, Sequence


class TargetKind(Enum):
    """What a palette option changes."""
    COLOR = auto()
    SIZE = auto()


@dataclass(frozen=True)
class HoverTarget:
    """A palette option; two targets are the same if kind and value match."""
    kind: TargetKind
    value: Any
    label: str = field(default="", compare=False)


# BGR colors
COLOR_OPTIONS = (
    HoverTarget(TargetKind.COLOR, (68, 68, 239), 'Red'),
    HoverTarget(TargetKind.COLOR, (246, 130, 59), 'Blue'),
    HoverTarget(TargetKind.COLOR, (129, 185, 16), 'Green'),
    HoverTarget(TargetKind.COLOR, (11, 158, 245), 'Orange'),
    HoverTarget(TargetKind.COLOR, (255, 255, 255), 'White'),
)

SIZE_OPTIONS = (
    HoverTarget(TargetKind.SIZE, 5, 'Small'),
    HoverTarget(TargetKind.SIZE, 12, 'Medium'),
    HoverTarget(TargetKind.SIZE, 25, 'Large'),
)


class SelectionMenu:
    """
    Maps a normalized cursor to a palette option.

    Each margin is split into equal vertical slots, one per option.
    """

    MARGIN = 0.15  # Fraction of screen width on each side

    def __init__(
        self,
        colors: Sequence[HoverTarget] = COLOR_OPTIONS,
        sizes: Sequence[HoverTarget] = SIZE_OPTIONS,
        margin: float = MARGIN
    ):
        self.colors = tuple(colors)
        self.sizes = tuple(sizes)
        self.margin = margin

    def target_at(self, x: float, y: float) -> Optional[HoverTarget]:
        """
        Find the option under a normalized cursor.

        Args:
            x: Mirrored normalized x (0 = left edge)
            y: Normalized y (0 = top)

        Returns:
            The hovered option, or None outside both margins
        """
        if x < self.margin:
            options = self.colors
        elif x > 1 - self.margin:
            options = self.sizes
        else:
            return None

        slot = math.floor(y * len(options))
        if 0 <= slot < len(options):
            return options[slot]
        return None


@dataclass
class DwellState:
    """Dwell timer for the hovered option."""
    start: Optional[float] = None
    progress: float = 0.0


class SelectionDwellController:
    """
    Commits a hovered option after it has been held long enough.

    After a commit the timer restarts, so holding the same option never
    commits twice within one dwell period.
    """

    DWELL_DURATION = 0.65  # Seconds

    def __init__(self, dwell_duration: float = DWELL_DURATION):
        self.dwell_duration = dwell_duration
        self.hover_target: Optional[HoverTarget] = None
        self.dwell = DwellState()

    @property
    def progress(self) -> float:
        """Dwell progress in percent (0-100)."""
        return self.dwell.progress

    def update(self, target: HoverTarget, now: float) -> Optional[HoverTarget]:
        """
        Report the option hovered this frame.

        Args:
            target: Hovered option
            now: Current time in seconds

        Returns:
            The option if it was committed this frame, else None
        """
        if target != self.hover_target:
            self.hover_target = target
            self.dwell = DwellState(start=now)
            return None

        if self.dwell.start is None:
            self.dwell = DwellState(start=now)
            return None

        elapsed = now - self.dwell.start
        self.dwell.progress = min(100.0, elapsed / self.dwell_duration * 100)

        if elapsed > self.dwell_duration:
            self.dwell = DwellState()
            return target

        return None

    def reset(self):
        """Forget the hovered option and its timer."""
        self.hover_target = None
        self.dwell = DwellState()
