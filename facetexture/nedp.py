"""Neighbourhood edge direction pattern (signed variant).

Gradients come from 3x3 Sobel operators.  Each strong edge pixel is scored
against its eight neighbours.  A neighbour scores its gradient magnitude
times a Gaussian weight of how far its gradient angle lies from the ideal
angle for its position.  The two best non-adjacent neighbours give the code.
"""

from __future__ import annotations

import math

import numpy as np

from facetexture.base import AppearanceCode, to_gray

# Neighbour offsets, in the order E, NE, N, NW, W, SW, S, SE (dx is the column).
_OFFSETS = ((1, 0), (1, -1), (0, -1), (-1, -1), (-1, 0), (-1, 1), (0, 1), (1, 1))
_ANGLE_RADIUS = 90
_FLAT = 1.0


def sobel_gradients(gray):
    """Return the horizontal and vertical 3x3 Sobel derivatives of ``gray``.

    Borders are reflected without repeating the edge pixel.  Results are
    rounded and saturated to the 16-bit signed range.
    """
    g = np.asarray(gray, dtype=np.float64)
    if g.ndim != 2:
        raise ValueError("sobel_gradients expects a 2-D grayscale image")
    if g.shape[0] < 2 or g.shape[1] < 2:
        raise ValueError(f"image of shape {g.shape} is too small for a Sobel filter")
    p = np.pad(g, 1, mode="reflect")
    gx = (
        (p[:-2, 2:] - p[:-2, :-2])
        + 2.0 * (p[1:-1, 2:] - p[1:-1, :-2])
        + (p[2:, 2:] - p[2:, :-2])
    )
    gy = (
        (p[2:, :-2] - p[:-2, :-2])
        + 2.0 * (p[2:, 1:-1] - p[:-2, 1:-1])
        + (p[2:, 2:] - p[:-2, 2:])
    )
    info = np.iinfo(np.int16)
    gx = np.clip(np.rint(gx), info.min, info.max).astype(np.int16)
    gy = np.clip(np.rint(gy), info.min, info.max).astype(np.int16)
    return gx, gy


def gaussian_weights(radius, sigma):
    """Return ``radius + 1`` angle weights.

    Entry 0 is 1.0.  Entry ``w`` (``w >= 1``) is the Gaussian at distance
    ``w - 1`` from the centre, scaled so that entry 1 is 0.95.
    """
    if radius < 0:
        raise ValueError(f"radius must not be negative, got {radius}")
    if sigma == 0:
        raise ValueError("sigma must not be zero")
    c = 2.0 * float(sigma) * float(sigma)
    norm = math.sqrt(c * 3.1416)
    kernel = [math.exp(-(x * x) / c) / norm for x in range(-radius, radius + 1)]
    scale = 0.95 / kernel[radius]
    return [1.0] + [kernel[kp] * scale for kp in range(radius, 0, -1)]


def angle_diff(position, angle):
    """Return the whole-degree distance of ``angle`` from the ideal angles of ``position``."""
    if position in (0, 4):
        diff1 = abs(90 - angle)
        diff2 = abs(270 - angle)
    elif position in (2, 6):
        diff1 = abs(360 - angle) if 270 < angle <= 360 else abs(angle)
        diff2 = abs(180 - angle)
    elif position in (1, 5):
        diff1 = angle + 45 if 0 <= angle < 45 else abs(315 - angle)
        diff2 = abs(135 - angle)
    elif position in (3, 7):
        diff1 = (360 - angle) + 45 if 315 <= angle < 360 else abs(45 - angle)
        diff2 = abs(225 - angle)
    else:
        diff1 = diff2 = 0
    return int(min(diff1, diff2))


def calc_sign(position, angle):
    """Return 8 when the gradient at ``position`` points the negative way, else 0."""
    if position in (0, 4):
        return 0 if 0 <= angle <= 180 else 8
    if position in (2, 6):
        return 8 if 90 <= angle <= 270 else 0
    if position in (1, 5):
        return 0 if 45 <= angle <= 225 else 8
    if position in (3, 7):
        return 8 if 135 <= angle <= 315 else 0
    return 0


def magnitude_threshold(magnitude, edge_percent, padding):
    """Return the adaptive magnitude threshold.

    This is the highest magnitude level ``h`` for which the share of
    interior pixels at or above ``h`` exceeds ``edge_percent``.  It is 0 if
    no level qualifies.  Pixels within ``padding`` of the edge are ignored.
    """
    mag = np.asarray(magnitude)
    if mag.ndim != 2:
        raise ValueError("magnitude_threshold expects a 2-D magnitude image")
    if padding < 0:
        raise ValueError(f"padding must not be negative, got {padding}")
    height, width = mag.shape
    total = (height - 2 * padding) * (width - 2 * padding)
    if height - 2 * padding <= 0 or width - 2 * padding <= 0:
        raise ValueError(f"image of shape {mag.shape} is too small for padding {padding}")
    interior = mag[padding : height - padding, padding : width - padding]
    values = interior.astype(np.int64).ravel()
    if values.size and (values.min() < 0 or values.max() > 255):
        raise ValueError("magnitude values must lie between 0 and 255")
    hist = np.bincount(values, minlength=256)
    percent = np.float32(edge_percent)
    running = np.float32(0)
    for level in range(255, -1, -1):
        running = np.float32(running + np.float32(hist[level]))
        if running / np.float32(total) > percent:
            return level
    return 0


def _magnitude(gx, gy):
    abs_x = np.minimum(np.abs(gx.astype(np.int64)), 255)
    abs_y = np.minimum(np.abs(gy.astype(np.int64)), 255)
    mag = np.hypot(abs_x, abs_y).astype(np.int64)
    return np.minimum(mag, 255).astype(np.uint8)


def _angles(gx, gy):
    """Gradient angle in degrees with the vertical axis flipped, truncated to int."""
    deg = np.degrees(np.arctan2(gy.astype(np.float64), gx.astype(np.float64)))
    deg = np.where(deg < 0, deg + 360.0, deg).astype(np.float32)
    deg[deg >= np.float32(360)] = 0
    flipped = np.where(deg != 0, np.float32(360) - deg, deg).astype(np.float32)
    return flipped.astype(np.int64)


class NEDPS(AppearanceCode):
    """Signed NEDP descriptor; the output loses ``padding`` pixels on every side."""

    def __init__(
        self,
        edge_percent=0.2,
        score_threshold=10,
        sigma=30.0,
        ignore_code=0,
        padding=1,
    ):
        if padding < 1:
            raise ValueError(f"padding must be at least 1, got {padding}")
        if not 0 <= ignore_code <= 255:
            raise ValueError(f"ignore_code must be between 0 and 255, got {ignore_code}")
        self.edge_percent = edge_percent
        self.score_threshold = int(score_threshold)
        self.sigma = sigma
        self.ignore_code = int(ignore_code)
        self.padding = int(padding)
        weights = np.array(gaussian_weights(_ANGLE_RADIUS, sigma), dtype=np.float32)
        levels = np.arange(256, dtype=np.float32)
        # score[m][d]: a neighbour of magnitude m at angle distance d.
        self._scores = (levels[:, None] * weights[None, :]).astype(np.float32).tolist()

    def _pair_code(self, first, second, sign):
        if first < second:
            return (first + sign) * 8 + second
        return second * 16 + (sign + first)

    def _end_code(self, first, sign):
        return (first + sign) * 8 + first

    def _pixel_code(self, mag, ang, i, j, threshold):
        threshold_score = self.score_threshold
        top = [[_FLAT, None], [_FLAT, None], [_FLAT, None]]
        for k, (dx, dy) in enumerate(_OFFSETS):
            n_mag = mag[i + dy][j + dx]
            if n_mag <= threshold:
                continue
            score = self._scores[n_mag][angle_diff(k, ang[i + dy][j + dx])]
            if score > threshold_score and score > top[2][0]:
                top[2] = [score, k]
                if top[2][0] > top[1][0]:
                    top[1], top[2] = top[2], top[1]
                    if top[1][0] > top[0][0]:
                        top[0], top[1] = top[1], top[0]
        first, second, third = top

        if first[1] is not None and second[1] is not None:
            if abs(first[1] - second[1]) in (1, 7):
                if first[0] < second[0]:
                    first = second
                second = third if third[0] > threshold_score else [_FLAT, second[1]]

        if first[0] == _FLAT:
            return self.ignore_code
        idx = first[1]
        dx, dy = _OFFSETS[idx]
        sign = calc_sign(idx, ang[i + dy][j + dx])
        if second[0] > _FLAT:
            return self._pair_code(idx, second[1], sign) & 0xFF
        if second[0] == _FLAT:
            return self._end_code(idx, sign) & 0xFF
        return self.ignore_code

    def generate(self, images):
        items = list(images)
        if not items:
            raise ValueError(f"{type(self).__name__}: no input image was given")
        gray = to_gray(items[0])
        if gray.ndim != 2:
            raise ValueError("expected a grayscale or colour image")
        height, width = gray.shape
        rows, cols = height - 2 * self.padding, width - 2 * self.padding
        if rows <= 0 or cols <= 0:
            raise ValueError(
                f"image of size {width}x{height} is too small for padding {self.padding}"
            )
        gx, gy = sobel_gradients(gray)
        magnitude = _magnitude(gx, gy)
        threshold = magnitude_threshold(magnitude, self.edge_percent, self.padding)
        mag = magnitude.astype(np.int64).tolist()
        ang = _angles(gx, gy).tolist()

        out = np.full((rows, cols), self.ignore_code, dtype=np.uint8)
        pad = self.padding
        for p in range(rows):
            i = p + pad
            for q in range(cols):
                j = q + pad
                if mag[i][j] > threshold:
                    out[p, q] = self._pixel_code(mag, ang, i, j, threshold)
        return [out]

    def code_size(self):
        return 128