"""Natural cubic spline interpolation between supporting points."""

from __future__ import annotations

from collections.abc import Iterable, MutableSequence, Sequence

import numpy as np

from .interpolation import Interpolator, SupportingPoint

__all__ = ["CubicSplineInterpolation", "build_matrix"]


def build_matrix(section_widths: Sequence[int]) -> np.ndarray:
    """Build the tridiagonal spline system matrix for the given section widths."""
    dimension = len(section_widths)
    matrix = np.zeros((dimension, dimension), dtype=np.float64)

    for n, curr_width in enumerate(section_widths):
        prev_width = section_widths[max(n - 1, 0)]
        is_first_row = n == 0
        is_last_row = n + 1 == dimension

        if not is_first_row:
            matrix[n, n - 1] = prev_width

        if is_first_row or is_last_row:
            matrix[n, n] = 2.0 * curr_width
        else:
            matrix[n, n] = 2.0 * (prev_width + curr_width)

        if not is_last_row:
            matrix[n, n + 1] = curr_width

    return matrix


class CubicSplineInterpolation(Interpolator):
    """Fills the gaps between supporting points with a cubic spline."""

    def __init__(self, supporting_points: Iterable[SupportingPoint]) -> None:
        super().__init__(supporting_points)
        points = self._ctx.supporting_points
        self._section_widths = [right.x - left.x for left, right in zip(points, points[1:])]

        matrix = build_matrix(self._section_widths)
        if matrix.size:
            try:
                self._cholesky = np.linalg.cholesky(matrix / 6.0)
            except np.linalg.LinAlgError as err:
                raise ValueError(f"spline matrix is not positive definite:\n{matrix}") from err
        else:
            self._cholesky = matrix

    def _solve(self, rhs: np.ndarray) -> np.ndarray:
        lower = self._cholesky
        intermediate = np.linalg.solve(lower, rhs)
        return np.linalg.solve(lower.T, intermediate)

    def interpolate(self, buffer: MutableSequence[float]) -> None:
        self._write_supporting_points(buffer)

        points = self._ctx.supporting_points
        if len(points) < 2:
            return

        gradients = np.array(
            [(left.y - right.y) / (left.x - right.x) for left, right in zip(points, points[1:])],
            dtype=np.float64,
        )

        gradient_diffs = np.empty_like(gradients)
        gradient_diffs[0] = gradients[0]
        gradient_diffs[1:] = np.diff(gradients)
        gradient_diffs[-1] = -gradients[-1]

        gammas = self._solve(gradient_diffs)

        for section in self._ctx.sections:
            n = section.left_supporting_point_idx + 1
            left = points[n - 1]
            right = points[n]

            prev_gamma = gammas[n - 1]
            # the last section has no right-hand gamma
            next_gamma = gammas[n] if n < len(gammas) else 0.0

            gradient = gradients[n - 1]
            width = self._section_widths[n - 1]

            for offset in range(1, section.amount + 1):
                bar_idx = left.x + offset
                x = float(bar_idx)
                dl = x - left.x
                dr = x - right.x

                buffer[bar_idx] = float(
                    left.y
                    + dl * gradient
                    + (dl * dr) / (6.0 * width)
                    * ((prev_gamma + 2.0 * next_gamma) * dl - (2.0 * prev_gamma + next_gamma) * dr)
                )