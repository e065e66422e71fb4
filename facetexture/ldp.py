"""Local directional pattern built from Kirsch compass responses."""

from __future__ import annotations

import numpy as np

from facetexture.base import AppearanceCode, kirsch_responses, single_image, to_gray

_CODE_BITS = 8


def combinations_count(n, r):
    """Return the number of ways to choose ``r`` items out of ``n``.

    A non-positive ``r`` gives 1 and ``r`` larger than ``n`` gives 0.
    """
    numerator = 1
    denominator = 1
    for _ in range(r):
        numerator *= n
        denominator *= r
        n -= 1
        r -= 1
    return numerator // denominator


def ldp_mapping_table(k):
    """Return, in ascending order, every byte value with exactly ``k`` bits set."""
    return tuple(value for value in range(256) if bin(value).count("1") == k)


def _rotate_right(value, count):
    count %= _CODE_BITS
    return ((value >> count) | (value << (_CODE_BITS - count))) & 0xFF


def ldp_code(responses, k, lsb_shift):
    """Set one bit for each of the ``k`` strongest directional responses.

    Bit ``d`` of the result is set when direction ``d`` is among the ``k``
    most prominent responses.  Responses of -1 or below never win a round;
    when nothing is left above -1, direction 0 is taken.  With
    ``lsb_shift`` the byte is rotated right so that the strongest
    direction lands on the least significant bit.
    """
    values = [int(v) for v in responses]
    if not 1 <= len(values) <= _CODE_BITS:
        raise ValueError(
            f"expected between 1 and {_CODE_BITS} directional responses, got {len(values)}"
        )
    remaining = list(values)
    code = 0
    strongest = 0
    for round_index in range(k):
        best = max(remaining)
        direction = remaining.index(best) if best > -1 else 0
        code |= 1 << direction
        remaining[direction] = -1
        if round_index == 0:
            strongest = direction

    if lsb_shift:
        code = _rotate_right(code, strongest)
    return code


class LDP(AppearanceCode):
    """LDP descriptor over a single image; output loses a one-pixel border.

    Codes are renumbered to ``0 .. code_size() - 1`` through the table of
    byte values having exactly ``k`` bits set.
    """

    def __init__(self, directions=8, k=3, absolute_max=True, lsb_shift=False):
        if not 1 <= directions <= _CODE_BITS:
            raise ValueError(
                f"directions must be between 1 and {_CODE_BITS}, got {directions}"
            )
        self.directions = directions
        self.k = k
        self.absolute_max = absolute_max
        self.lsb_shift = lsb_shift
        table = ldp_mapping_table(k)[: self.code_size()]
        self._mapping = {value: index for index, value in enumerate(table)}

    def generate(self, images):
        gray = to_gray(single_image(images, "LDP"))
        resp = kirsch_responses(gray)[:, :, : self.directions]
        if self.absolute_max:
            resp = np.abs(resp)
        rows, cols = resp.shape[:2]
        codes = []
        for pixel in resp.reshape(rows * cols, self.directions).tolist():
            code = ldp_code(pixel, self.k, self.lsb_shift) or 255
            codes.append(self._mapping.get(code, code))
        return [np.array(codes, dtype=np.uint8).reshape(rows, cols)]

    def code_size(self):
        return combinations_count(_CODE_BITS, self.k)