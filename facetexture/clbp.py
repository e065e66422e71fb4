"""Completed local binary pattern built from Kirsch compass responses."""

from __future__ import annotations

import numpy as np

from facetexture.base import AppearanceCode, kirsch_responses, single_image, to_gray


def clbp_code(responses):
    """Encode the strongest and weakest Kirsch directions as a 6-bit code.

    The upper three bits hold the direction of the largest response, the
    lower three the direction of the smallest.
    """
    values = [int(v) for v in responses]
    if len(values) != 8:
        raise ValueError(f"expected 8 directional responses, got {len(values)}")
    best = max(values)
    dir_max = values.index(best) if best > -1 else 0
    dir_min = values.index(min(values))
    return (dir_max << 3) | dir_min


class CLBP(AppearanceCode):
    """CLBP descriptor over a single image; border pixels are coded 0."""

    def generate(self, images):
        gray = to_gray(single_image(images, "CLBP"))
        resp = kirsch_responses(gray)
        top = resp.max(axis=2)
        dir_max = np.where(top > -1, resp.argmax(axis=2), 0)
        dir_min = resp.argmin(axis=2)
        out = np.zeros(gray.shape, dtype=np.uint8)
        out[1:-1, 1:-1] = (dir_max << 3) | dir_min
        return [out]

    def code_size(self):
        return 100