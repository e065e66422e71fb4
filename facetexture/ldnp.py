"""Local directional number pattern with Kirsch or Gaussian-derivative masks."""

from __future__ import annotations

import enum
import warnings

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from facetexture.base import KIRSCH_MASKS, AppearanceCode, single_image, to_gray

_A = 0.707106781176727
_E = 0.00000263514172907059

# Derivative-of-Gaussian compass masks, in the order E, NE, N, NW, W, SW, S, SE.
_GAUSSIAN_MASKS = np.array(
    [
        [[_E, 0, -_E], [_A, 0, -_A], [_E, 0, -_E]],
        [[0, -_E, -_A], [_E, 0, -_E], [_A, _E, 0]],
        [[-_E, -_A, -_E], [0, 0, 0], [_E, _A, _E]],
        [[-_A, -_E, 0], [-_E, 0, _E], [0, _E, _A]],
        [[-_E, 0, _E], [-_A, 0, _A], [-_E, 0, _E]],
        [[0, _E, _A], [-_E, 0, _E], [-_A, -_E, 0]],
        [[_E, _A, _E], [0, 0, 0], [-_E, -_A, -_E]],
        [[_A, _E, 0], [_E, 0, -_E], [0, -_E, -_A]],
    ],
    dtype=np.float64,
)

_MAX_START = -10000.0
_MIN_START = 10000.0


class MaskType(enum.Enum):
    """Edge operator used to compute the directional responses."""

    KIRSCH = "kirsch"
    GAUSSIAN = "gaussian"


def edge_masks(mask_type):
    """Return the eight 3x3 compass masks of ``mask_type`` as floats."""
    if MaskType(mask_type) is MaskType.GAUSSIAN:
        return _GAUSSIAN_MASKS.copy()
    return KIRSCH_MASKS.astype(np.float64)


def _parse_mask_type(value):
    if isinstance(value, MaskType):
        return value
    name = str(value).lower()
    try:
        return MaskType(name)
    except ValueError:
        warnings.warn(
            f"unknown mask type {value!r}; the Kirsch mask will be used",
            stacklevel=3,
        )
        return MaskType.KIRSCH


def ldnp_code(responses):
    """Encode the directions of the largest and smallest absolute response.

    The code is ``8 * strongest + weakest``; ties go to the lower direction.
    """
    values = [abs(float(v)) for v in responses]
    if len(values) != 8:
        raise ValueError(f"expected 8 directional responses, got {len(values)}")
    top = max(values)
    strongest = values.index(top) if top > _MAX_START else 0
    bottom = min(values)
    weakest = values.index(bottom) if bottom < _MIN_START else 0
    return (8 * strongest + weakest) & 0xFF


def _mask_responses(gray, masks):
    g = np.asarray(gray, dtype=np.float64)
    if g.ndim != 2:
        raise ValueError("expected a 2-D grayscale image")
    height, width = g.shape
    if height < 3 or width < 3:
        raise ValueError(f"image of size {width}x{height} is smaller than 3x3")
    windows = sliding_window_view(g, (3, 3))
    acc = None
    for r in range(3):
        for c in range(3):
            term = windows[:, :, r, c, np.newaxis] * masks[:, r, c]
            acc = term if acc is None else acc + term
    return acc


class LDNP(AppearanceCode):
    """LDNP descriptor over a single image; output loses a one-pixel border."""

    def __init__(self, mask_type=MaskType.KIRSCH):
        self.mask_type = _parse_mask_type(mask_type)
        self._masks = edge_masks(self.mask_type)

    def generate(self, images):
        gray = to_gray(single_image(images, "LDNP"))
        magnitude = np.abs(_mask_responses(gray, self._masks))
        top = magnitude.max(axis=2)
        bottom = magnitude.min(axis=2)
        strongest = np.where(top > _MAX_START, magnitude.argmax(axis=2), 0)
        weakest = np.where(bottom < _MIN_START, magnitude.argmin(axis=2), 0)
        return [((8 * strongest + weakest) & 0xFF).astype(np.uint8)]

    def code_size(self):
        return 8 * 8