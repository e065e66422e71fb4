import numpy as np
import pytest

from facetexture.base import kirsch_responses, to_gray
from facetexture.ptp import PTP, ptp_code


def test_constant_image_code():
    (out,) = PTP().generate([np.full((5, 5, 3), 40, dtype=np.uint8)])
    assert out.shape == (3, 3)
    assert np.all(out == 8)


def test_lead_direction_in_high_bits():
    values = [0, 0, 0, 90, 0, 20, 0, 0]
    assert ptp_code(values) >> 5 == values.index(max(values))


def test_adjacent_second_direction_is_replaced_by_third():
    values = [0, 0, 0, 90, 80, 0, 70, 0]
    code = ptp_code(values)
    assert (code >> 2) & 7 == values.index(70)


def test_non_adjacent_second_direction_is_kept():
    values = [0, 60, 0, 90, 0, 0, 70, 0]
    code = ptp_code(values)
    assert (code >> 2) & 7 == values.index(70)


def test_strong_positive_and_weak_leads():
    assert ptp_code([0, 0, 0, 90, 0, 0, 0, 0]) & 3 == 2
    assert ptp_code([0, 0, 0, 10, 0, 0, 0, 0]) & 3 == 0


def test_strong_negative_lead():
    assert ptp_code([-20] * 8) & 3 == 1


def test_wrong_length_rejected():
    with pytest.raises(ValueError):
        ptp_code([0] * 7)


def test_generate_matches_per_pixel_code():
    rng = np.random.default_rng(3)
    image = rng.integers(0, 256, (6, 7, 3), dtype=np.uint8)
    (out,) = PTP().generate([image])
    resp = kirsch_responses(to_gray(image))
    assert out.shape == resp.shape[:2]
    for (i, j), value in np.ndenumerate(out):
        assert value == ptp_code(resp[i, j])


def test_generate_accepts_gray_input():
    rng = np.random.default_rng(5)
    gray = rng.integers(0, 256, (5, 5), dtype=np.uint8)
    (out,) = PTP().generate([gray])
    assert out.shape == (3, 3)
    assert out.dtype == np.uint8


def test_generate_empty_rejected():
    with pytest.raises(ValueError):
        PTP().generate([])


def test_code_size():
    assert PTP().code_size() == 255