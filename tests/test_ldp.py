import numpy as np
import pytest

from facetexture.base import SequenceNotSupportedError
from facetexture.ldp import LDP, combinations_count, ldp_code, ldp_mapping_table


@pytest.mark.parametrize("k", range(9))
def test_combinations_match_mapping_table_length(k):
    assert combinations_count(8, k) == len(ldp_mapping_table(k))


def test_combinations_with_zero_choices_is_one():
    assert combinations_count(8, 0) == 1


def test_combinations_more_than_available_is_zero():
    assert combinations_count(3, 5) == 0


@pytest.mark.parametrize("k", [1, 3, 5])
def test_mapping_table_sorted_and_popcount(k):
    table = ldp_mapping_table(k)
    assert list(table) == sorted(set(table))
    assert all(bin(v).count("1") == k for v in table)


def test_ldp_code_marks_top_directions():
    code = ldp_code([0, 0, 0, 0, 10, 20, 30, 0], 3, False)
    assert code == (1 << 4) | (1 << 5) | (1 << 6)


def test_ldp_code_lsb_shift_rotates_strongest_to_bit_zero():
    code = ldp_code([0, 0, 0, 0, 10, 20, 30, 0], 3, True)
    assert code & 1 == 1
    assert bin(code).count("1") == 3
    assert code == 0b11000001


def test_ldp_code_ties_take_lowest_directions():
    assert ldp_code([5] * 8, 2, False) == 0b11


def test_ldp_code_all_negative_falls_back_to_direction_zero():
    assert ldp_code([-5] * 8, 3, False) == 1


def test_ldp_code_rejects_too_many_responses():
    with pytest.raises(ValueError):
        ldp_code([0] * 9, 3, False)


@pytest.mark.parametrize("seed", [0, 1, 2])
def test_lsb_shift_preserves_popcount(seed):
    rng = np.random.default_rng(seed)
    values = rng.integers(0, 1000, size=8).tolist()
    plain = ldp_code(values, 3, False)
    shifted = ldp_code(values, 3, True)
    assert bin(plain).count("1") == bin(shifted).count("1") == 3
    assert shifted & 1 == 1


def test_generate_flat_image_maps_to_first_code():
    image = np.full((5, 6), 90, dtype=np.uint8)
    (out,) = LDP().generate([image])
    assert out.shape == (3, 4)
    assert out.dtype == np.uint8
    assert np.all(out == 0)


def test_generate_codes_within_code_size():
    rng = np.random.default_rng(7)
    image = rng.integers(0, 256, size=(12, 10, 3), dtype=np.uint8)
    ldp = LDP()
    (out,) = ldp.generate([image])
    assert out.shape == (10, 8)
    assert int(out.max()) < ldp.code_size()


def test_code_size_follows_k():
    assert LDP(k=2).code_size() == combinations_count(8, 2)
    assert LDP(k=2).code_size() == len(ldp_mapping_table(2))


def test_generate_rejects_sequences():
    image = np.zeros((4, 4), dtype=np.uint8)
    with pytest.raises(SequenceNotSupportedError):
        LDP().generate([image, image])


def test_invalid_directions_rejected():
    with pytest.raises(ValueError):
        LDP(directions=9)