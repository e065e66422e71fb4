"""Neighbourhood edge direction pattern (unsigned variant).

This works like the signed descriptor, but the gradient sign is left out of
the code.  A pixel with two prominent neighbours gets ``8 * low + high`` from
their direction indices.  An end-of-line pixel with one prominent neighbour
``d`` gets ``8 * d + d``.
"""

from __future__ import annotations

from facetexture.nedp import NEDPS


class NEDPU(NEDPS):
    """Unsigned NEDP descriptor; the output loses ``padding`` pixels on every side."""

    def _pair_code(self, first, second, sign):
        low, high = min(first, second), max(first, second)
        return low * 8 + high

    def _end_code(self, first, sign):
        return first * 8 + first

    def code_size(self):
        return 64