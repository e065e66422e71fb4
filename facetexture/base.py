"""Shared building blocks for the appearance-code descriptors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

# Kirsch compass masks, in the order E, NE, N, NW, W, SW, S, SE.
KIRSCH_MASKS = np.array(
    [
        [[-3, -3, 5], [-3, 0, 5], [-3, -3, 5]],
        [[-3, 5, 5], [-3, 0, 5], [-3, -3, -3]],
        [[5, 5, 5], [-3, 0, -3], [-3, -3, -3]],
        [[5, 5, -3], [5, 0, -3], [-3, -3, -3]],
        [[5, -3, -3], [5, 0, -3], [5, -3, -3]],
        [[-3, -3, -3], [5, 0, -3], [5, 5, -3]],
        [[-3, -3, -3], [-3, 0, -3], [5, 5, 5]],
        [[-3, -3, -3], [-3, 0, 5], [-3, 5, 5]],
    ],
    dtype=np.int64,
)

# Fixed-point RGB weights (sum to 1 << 14), channel 0 taken as red.
_GRAY_WEIGHTS = np.array([4899, 9617, 1868], dtype=np.int64)
_GRAY_SHIFT = 14


class SequenceNotSupportedError(ValueError):
    """Raised when a descriptor that works on one image is given several."""


class AppearanceCode(ABC):
    """A micro-pattern descriptor that turns images into code images."""

    @abstractmethod
    def generate(self, images):
        """Return a list of code images computed from ``images``."""

    @abstractmethod
    def code_size(self):
        """Return the number of distinct codes the descriptor can emit."""


def to_gray(image):
    """Convert an RGB image to grayscale; 2-D images are returned unchanged."""
    arr = np.asarray(image)
    if arr.ndim == 2:
        return arr
    if arr.ndim != 3:
        raise ValueError(f"expected a 2-D or 3-D image, got {arr.ndim} dimensions")
    channels = arr.shape[2]
    if channels == 1:
        return arr[:, :, 0]
    if channels < 3:
        raise ValueError(f"cannot convert an image with {channels} channels to gray")
    if np.issubdtype(arr.dtype, np.integer):
        acc = arr[:, :, :3].astype(np.int64) @ _GRAY_WEIGHTS
        gray = (acc + (1 << (_GRAY_SHIFT - 1))) >> _GRAY_SHIFT
        info = np.iinfo(arr.dtype)
        return np.clip(gray, info.min, info.max).astype(arr.dtype)
    weights = _GRAY_WEIGHTS / float(1 << _GRAY_SHIFT)
    return (arr[:, :, :3] @ weights).astype(arr.dtype)


def single_image(images: Iterable, name: str):
    """Return the only image in ``images``; reject empty input and sequences."""
    items = list(images)
    if not items:
        raise ValueError(f"{name}: no input image was given")
    if len(items) > 1:
        raise SequenceNotSupportedError(
            f"{name} cannot extract features from an image sequence"
        )
    return items[0]


def kirsch_responses(gray):
    """Return the eight Kirsch responses of every interior pixel.

    The result has shape ``(height - 2, width - 2, 8)``.
    """
    g = np.asarray(gray, dtype=np.int64)
    if g.ndim != 2:
        raise ValueError("kirsch_responses expects a 2-D grayscale image")
    height, width = g.shape
    if height < 3 or width < 3:
        raise ValueError(f"image of size {width}x{height} is smaller than 3x3")
    windows = sliding_window_view(g, (3, 3))
    return np.einsum("ijrc,krc->ijk", windows, KIRSCH_MASKS)