"""Prominent ternary pattern built from Kirsch compass responses."""

from __future__ import annotations

import numpy as np

from facetexture.base import AppearanceCode, kirsch_responses, to_gray

_TERNARY_THRESHOLD = 15


def ptp_code(responses):
    """Encode the two prominent directions and the sign of the strongest.

    The code is ``32 * first + 4 * second + ternary`` where ``ternary`` is
    2 for a strong positive lead response, 1 for a strong negative one and
    0 otherwise.  A second direction adjacent to the first is replaced by
    the third most prominent one.
    """
    values = [int(v) for v in responses]
    if len(values) != 8:
        raise ValueError(f"expected 8 directional responses, got {len(values)}")
    remaining = list(values)
    top = []
    for _ in range(3):
        best = max(remaining)
        direction = remaining.index(best) if best > -1 else 0
        top.append(direction)
        remaining[direction] = -1
    first, second, third = top

    lead = values[first]
    if lead < -_TERNARY_THRESHOLD:
        ternary = 1
    elif lead > _TERNARY_THRESHOLD:
        ternary = 2
    else:
        ternary = 0

    if abs(first - second) in (1, 7):
        second = third
    return (32 * first + 4 * second + ternary) & 0xFF


class PTP(AppearanceCode):
    """PTP descriptor; the output is two pixels smaller in each dimension."""

    def generate(self, images):
        items = list(images)
        if not items:
            raise ValueError("PTP: no input image was given")
        gray = to_gray(items[0])
        resp = kirsch_responses(gray)
        rows, cols = resp.shape[:2]
        codes = [ptp_code(pixel) for pixel in resp.reshape(-1, 8).tolist()]
        return [np.array(codes, dtype=np.uint8).reshape(rows, cols)]

    def code_size(self):
        return 255