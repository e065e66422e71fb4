import numpy as np
import pytest

from facetexture.base import to_gray
from facetexture.lbp import LBP, elbp, uniform_mapping_table


def _random_image(shape, seed=0):
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=shape, dtype=np.uint8)


def test_uniform_table_has_58_uniform_patterns_for_8_neighbors():
    table = uniform_mapping_table(8, 2)
    assert len(table) == 256
    assert int(table.max()) == 58
    assert len(set(table.tolist()) - {58}) == 58


def test_uniform_table_labels_are_ascending_for_uniform_patterns():
    table = uniform_mapping_table(8, 2)
    labels = [int(v) for v in table if v != 58]
    assert labels == list(range(58))
    assert table[0] == 0


def test_uniform_table_zero_transitions():
    table = uniform_mapping_table(4, 0)
    assert set(table.tolist()) == {0, 1, 2}
    assert table[0] == 0
    assert table[15] == 1


def test_uniform_table_rejects_bad_neighbors():
    with pytest.raises(ValueError):
        uniform_mapping_table(0, 2)


def test_default_code_size_is_59():
    assert LBP().code_size() == 59


def test_non_uniform_code_size():
    assert LBP(uniform=False).code_size() == 256
    assert LBP(neighbors=4, uniform=False).code_size() == 16


def test_elbp_output_shape():
    img = _random_image((10, 12))
    assert elbp(img, 1, 8).shape == (8, 10)
    assert elbp(img, 2, 8).shape == (6, 8)


def test_elbp_constant_image_sets_all_bits():
    img = np.full((5, 6), 77, dtype=np.uint8)
    codes = elbp(img, 1, 8)
    np.testing.assert_array_equal(codes, np.full((3, 4), 255))


def test_elbp_bright_centre_gives_zero():
    img = np.full((3, 3), 10, dtype=np.uint8)
    img[1, 1] = 200
    assert elbp(img, 1, 8)[0, 0] == 0


def test_elbp_dark_centre_sets_all_bits():
    img = np.full((3, 3), 200, dtype=np.uint8)
    img[1, 1] = 10
    assert elbp(img, 1, 8)[0, 0] == (1 << 8) - 1


def test_elbp_dark_pixel_below_clears_first_bit():
    img = np.full((3, 3), 100, dtype=np.uint8)
    img[2, 1] = 0
    code = int(elbp(img, 1, 8)[0, 0])
    assert code & 1 == 0
    assert code & (1 << 4)


def test_elbp_float_input_matches_integer_input_on_integral_values():
    img = _random_image((7, 7), seed=3)
    np.testing.assert_array_equal(
        elbp(img, 1, 8), elbp(img.astype(np.float64), 1, 8)
    )


def test_elbp_codes_within_range():
    codes = elbp(_random_image((9, 9), seed=1), 1, 8)
    assert codes.min() >= 0
    assert codes.max() < 256


def test_elbp_rejects_unsupported_dtype():
    with pytest.raises(TypeError):
        elbp(np.zeros((5, 5), dtype=np.int64), 1, 8)


def test_elbp_rejects_too_small_image():
    with pytest.raises(ValueError):
        elbp(np.zeros((2, 2), dtype=np.uint8), 1, 8)


def test_elbp_rejects_negative_radius():
    with pytest.raises(ValueError):
        elbp(np.zeros((5, 5), dtype=np.uint8), -1, 8)


def test_raw_generate_matches_elbp():
    img = _random_image((8, 8), seed=2)
    result = LBP(uniform=False).generate([img])
    assert len(result) == 1
    np.testing.assert_array_equal(result[0], elbp(img, 1, 8))


def test_uniform_generate_applies_table():
    img = _random_image((8, 8), seed=4)
    table = uniform_mapping_table(8, 2)
    out = LBP().generate_one(img)
    np.testing.assert_array_equal(out, table[elbp(img, 1, 8)])
    assert out.max() < LBP().code_size()


def test_uniform_constant_image_maps_full_pattern():
    img = np.full((4, 4), 50, dtype=np.uint8)
    out = LBP().generate_one(img)
    np.testing.assert_array_equal(out, np.full((2, 2), 57))


def test_generate_handles_sequences():
    images = [_random_image((6, 6), seed=s) for s in range(3)]
    descriptor = LBP()
    outputs = descriptor.generate(images)
    assert len(outputs) == 3
    for image, output in zip(images, outputs):
        np.testing.assert_array_equal(output, descriptor.generate_one(image))


def test_rgb_image_is_converted_to_gray():
    rgb = _random_image((6, 7, 3), seed=5)
    descriptor = LBP()
    np.testing.assert_array_equal(
        descriptor.generate_one(rgb), descriptor.generate_one(to_gray(rgb))
    )


def test_apply_uniform_on_raw_codes():
    descriptor = LBP()
    codes = np.array([[0, 255], [5, 1]])
    table = uniform_mapping_table(8, 2)
    np.testing.assert_array_equal(descriptor.apply_uniform(codes), table[codes])


def test_uniform_string_settings():
    assert LBP(uniform="FALSE").code_size() == 256
    assert LBP(uniform="True").code_size() == 59


def test_unknown_uniform_setting_warns_and_uses_uniform():
    with pytest.warns(UserWarning):
        descriptor = LBP(uniform="maybe")
    assert descriptor.uniform is True


def test_constructor_rejects_bad_parameters():
    with pytest.raises(ValueError):
        LBP(radius=-2)
    with pytest.raises(ValueError):
        LBP(neighbors=0)