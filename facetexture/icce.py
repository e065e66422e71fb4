"""ICCE descriptor: two non-adjacent prominent directions plus a sign."""

from __future__ import annotations

import numpy as np

from facetexture.base import AppearanceCode, kirsch_responses, single_image, to_gray

_THRESHOLD = 10
_SUPPRESSED = -10_000_000


def icce_code(responses):
    """Encode two prominent, non-adjacent directions and a ternary sign.

    The code is ``32 * first + 4 * second + ternary`` where ``ternary`` is
    1 for a lead response above the threshold, 2 below its negative, and
    0 otherwise, in which case both directions are reported as 0.
    """
    values = [int(v) for v in responses]
    if len(values) != 8:
        raise ValueError(f"expected 8 directional responses, got {len(values)}")
    remaining = list(values)
    main = []
    for _ in range(2):
        best = max(remaining)
        direction = remaining.index(best) if best > _SUPPRESSED else 0
        main.append(direction)
        for neighbour in (direction, (direction + 1) % 8, (direction + 7) % 8):
            remaining[neighbour] = _SUPPRESSED
    first, second = main

    lead = values[first]
    if lead > _THRESHOLD:
        ternary = 1
    elif lead < -_THRESHOLD:
        ternary = 2
    else:
        ternary = 0
        first = second = 0
    return (32 * first + 4 * second + ternary) & 0xFF


class ICCE(AppearanceCode):
    """ICCE descriptor over a single image; output loses a one-pixel border."""

    def generate(self, images):
        gray = to_gray(single_image(images, "ICCE"))
        resp = kirsch_responses(gray)
        rows, cols = resp.shape[:2]
        codes = [icce_code(pixel) for pixel in resp.reshape(-1, 8).tolist()]
        return [np.array(codes, dtype=np.uint8).reshape(rows, cols)]

    def code_size(self):
        return 255