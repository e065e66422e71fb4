"""Local binary pattern with circular, bilinearly interpolated neighbourhoods."""

from __future__ import annotations

import math
import warnings

import numpy as np

from facetexture.base import AppearanceCode, to_gray

_SUPPORTED_DTYPES = (
    np.int8,
    np.uint8,
    np.int16,
    np.uint16,
    np.int32,
    np.float32,
    np.float64,
)
_MAX_NEIGHBORS = 31
_FLOAT_EPS = float(np.finfo(np.float32).eps)


def _transitions(value, neighbors):
    rotated = (value >> 1) | ((value & 1) << (neighbors - 1))
    return bin(value ^ rotated).count("1")


def _build_uniform(neighbors, max_transitions):
    """Return the mapping table and the number of distinct mapped codes."""
    if not 1 <= neighbors <= _MAX_NEIGHBORS:
        raise ValueError(
            f"neighbors must be between 1 and {_MAX_NEIGHBORS}, got {neighbors}"
        )
    size = 1 << neighbors
    table = np.full(size, -1, dtype=np.int64)
    uniform_count = 0
    for value in range(size):
        if _transitions(value, neighbors) <= max_transitions:
            table[value] = uniform_count
            uniform_count += 1
    table[table == -1] = uniform_count
    return table, uniform_count + 1


def uniform_mapping_table(neighbors, max_transitions):
    """Map every ``neighbors``-bit pattern to its uniform-LBP label.

    Patterns with at most ``max_transitions`` circular 0/1 transitions get
    consecutive labels in ascending pattern order; all other patterns share
    the label following the last uniform one.
    """
    table, _ = _build_uniform(neighbors, max_transitions)
    return table


def elbp(gray, radius, neighbors):
    """Compute the extended LBP code of every pixel at least ``radius`` from the edge.

    Each of the ``neighbors`` sample points on the circle is bilinearly
    interpolated; bit ``n`` is set when sample ``n`` is greater than or
    (within float precision) equal to the centre pixel.  The result is an
    ``int32`` array of shape ``(height - 2 * radius, width - 2 * radius)``.
    """
    src = np.asarray(gray)
    if src.ndim != 2:
        raise ValueError("elbp expects a 2-D grayscale image")
    if src.dtype.type not in _SUPPORTED_DTYPES:
        raise TypeError(f"unsupported image element type {src.dtype}")
    if radius < 0:
        raise ValueError(f"radius must not be negative, got {radius}")
    if not 1 <= neighbors <= _MAX_NEIGHBORS:
        raise ValueError(
            f"neighbors must be between 1 and {_MAX_NEIGHBORS}, got {neighbors}"
        )
    rows, cols = src.shape
    height, width = rows - 2 * radius, cols - 2 * radius
    if height <= 0 or width <= 0:
        raise ValueError(
            f"image of size {cols}x{rows} is too small for radius {radius}"
        )

    work = np.float64 if src.dtype == np.float64 else np.float32
    values = src.astype(work)
    centre = values[radius : radius + height, radius : radius + width]

    def shifted(dy, dx):
        top, left = radius + dy, radius + dx
        return values[top : top + height, left : left + width]

    codes = np.zeros((height, width), dtype=np.int64)
    one = np.float32(1)
    for n in range(neighbors):
        angle = 2.0 * math.pi * n / float(np.float32(neighbors))
        x = np.float32(-radius * math.sin(angle))
        y = np.float32(radius * math.cos(angle))
        fx, fy = int(math.floor(x)), int(math.floor(y))
        cx, cy = int(math.ceil(x)), int(math.ceil(y))
        ty = np.float32(y - np.float32(fy))
        tx = np.float32(x - np.float32(fx))
        w1 = work((one - tx) * (one - ty))
        w2 = work(tx * (one - ty))
        w3 = work((one - tx) * ty)
        w4 = work(tx * ty)
        sample = (
            w1 * shifted(fy, fx)
            + w2 * shifted(fy, cx)
            + w3 * shifted(cy, fx)
            + w4 * shifted(cy, cx)
        ).astype(np.float32)
        diff = np.abs(sample.astype(work) - centre)
        hit = (sample.astype(work) > centre) | (diff < _FLOAT_EPS)
        codes |= hit.astype(np.int64) << n
    return codes.astype(np.int32)


def _parse_uniform(value):
    if isinstance(value, bool):
        return value
    text = str(value).lower()
    if text == "true":
        return True
    if text == "false":
        return False
    warnings.warn(
        f"unknown uniform setting {value!r}; uniform codes will be used",
        stacklevel=3,
    )
    return True


class LBP(AppearanceCode):
    """LBP descriptor; every image of a sequence is coded separately."""

    def __init__(self, radius=1, neighbors=8, uniform=True, max_transitions=2):
        if radius < 0:
            raise ValueError(f"radius must not be negative, got {radius}")
        if not 1 <= neighbors <= _MAX_NEIGHBORS:
            raise ValueError(
                f"neighbors must be between 1 and {_MAX_NEIGHBORS}, got {neighbors}"
            )
        self.radius = radius
        self.neighbors = neighbors
        self.max_transitions = max_transitions
        self.uniform = _parse_uniform(uniform)
        self._table = None
        self._diversity = 0
        if self.uniform:
            self._ensure_table()

    def _ensure_table(self):
        if self._table is None:
            self._table, self._diversity = _build_uniform(
                self.neighbors, self.max_transitions
            )
        return self._table

    def generate(self, images):
        return [self.generate_one(image) for image in images]

    def generate_one(self, image):
        """Return the code image of a single image."""
        codes = elbp(to_gray(image), self.radius, self.neighbors)
        if self.uniform:
            codes = self.apply_uniform(codes)
        return codes

    def apply_uniform(self, codes):
        """Relabel raw LBP codes with their uniform-pattern labels."""
        table = self._ensure_table()
        raw = np.asarray(codes, dtype=np.int64)
        return table[raw].astype(np.int32)

    def code_size(self):
        if not self.uniform:
            return 1 << self.neighbors
        self._ensure_table()
        return self._diversity