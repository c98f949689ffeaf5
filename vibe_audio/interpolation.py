"""Interpolation of bar values between supporting points."""

from __future__ import annotations

import heapq
from abc import ABC, abstractmethod
from collections.abc import Iterable, MutableSequence
from dataclasses import dataclass

__all__ = [
    "SupportingPoint",
    "InterpolationSection",
    "InterpolationContext",
    "Interpolator",
    "NothingInterpolation",
    "LinearInterpolation",
]


@dataclass
class SupportingPoint:
    """A known bar value: ``y`` at bar index ``x``."""

    x: int
    y: float


@dataclass(frozen=True)
class InterpolationSection:
    """A gap of ``amount`` bars right of the supporting point at ``left_supporting_point_idx``."""

    left_supporting_point_idx: int
    amount: int


class InterpolationContext:
    """Supporting points together with the gaps between them."""

    def __init__(self, supporting_points: Iterable[SupportingPoint]) -> None:
        self.supporting_points: list[SupportingPoint] = list(supporting_points)
        self.sections: list[InterpolationSection] = []

        for idx, (left, right) in enumerate(
            zip(self.supporting_points, self.supporting_points[1:])
        ):
            if right.x <= left.x:
                raise ValueError(
                    f"supporting points must be strictly increasing in x, "
                    f"got {left.x} followed by {right.x}"
                )
            gap_size = right.x - left.x - 1
            if gap_size > 0:
                self.sections.append(InterpolationSection(idx, gap_size))

    def __str__(self) -> str:
        lines = [
            "",
            f"Amount supporting points: {len(self.supporting_points)}",
            f"Amount sections: {len(self.sections)}",
            "Supporting point and sections:",
        ]
        points = ((idx, 0, repr(point)) for idx, point in enumerate(self.supporting_points))
        sections = (
            (section.left_supporting_point_idx, 1, repr(section)) for section in self.sections
        )
        lines.extend(text for _, _, text in heapq.merge(points, sections))
        return "\n".join(lines) + "\n"


class Interpolator(ABC):
    """Fills a bar buffer from a set of supporting points."""

    def __init__(self, supporting_points: Iterable[SupportingPoint]) -> None:
        self._ctx = InterpolationContext(supporting_points)

    def supporting_points(self) -> list[SupportingPoint]:
        """Return the live supporting points; changing their ``y`` affects the next run."""
        return self._ctx.supporting_points

    def _write_supporting_points(self, buffer: MutableSequence[float]) -> None:
        for point in self._ctx.supporting_points:
            buffer[point.x] = point.y

    @abstractmethod
    def interpolate(self, buffer: MutableSequence[float]) -> None:
        """Write the bar values into ``buffer`` in place."""


class NothingInterpolation(Interpolator):
    """Writes only the supporting points and leaves the gaps untouched."""

    def interpolate(self, buffer: MutableSequence[float]) -> None:
        self._write_supporting_points(buffer)


class LinearInterpolation(Interpolator):
    """Fills the gaps by straight lines between neighbouring supporting points."""

    def interpolate(self, buffer: MutableSequence[float]) -> None:
        self._write_supporting_points(buffer)

        points = self._ctx.supporting_points
        for section in self._ctx.sections:
            left = points[section.left_supporting_point_idx]
            right = points[section.left_supporting_point_idx + 1]

            amount = section.amount
            for step in range(1, amount + 1):
                t = step / (amount + 1)
                buffer[left.x + step] = t * right.y + (1.0 - t) * left.y