"""
Test the five filters against their defining properties
"""
import math

import numpy as np
import pytest

from lumawarp.filters import color_noise, glitch, grayscale, solar_rays, wave_distortion
from lumawarp.pixel_buffer import SENTINEL_COLOR, PixelBuffer, filled


def create_test_image(width=64, height=48, seed=2016):
    """Random opaque-ish RGBA image"""
    rng = np.random.default_rng(seed)
    return PixelBuffer.from_array(rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8))


ALL_FILTERS = [
    ("solar_rays", lambda buffer: solar_rays(buffer)),
    ("wave_distortion", lambda buffer: wave_distortion(buffer, 15.0)),
    ("color_noise", lambda buffer: color_noise(buffer, 0.5, np.random.default_rng(1))),
    ("glitch", lambda buffer: glitch(buffer, np.random.default_rng(1))),
    ("grayscale", lambda buffer: grayscale(buffer)),
]


@pytest.mark.parametrize("name, apply", ALL_FILTERS)
def test_empty_buffer_is_noop(name, apply):
    buffer = PixelBuffer.empty()

    apply(buffer)

    assert buffer == PixelBuffer.empty()


@pytest.mark.parametrize("name, apply", ALL_FILTERS)
def test_default_rng_path_runs(name, apply):
    """Randomised filters also work without an explicit generator"""
    buffer = create_test_image(16, 16)

    if name == "color_noise":
        color_noise(buffer)
    elif name == "glitch":
        glitch(buffer)
    else:
        apply(buffer)

    assert buffer.size == (16, 16)


# ---------------------------------------------------------------- solar rays

def reference_solar_boost(x, y, width, height):
    center_x, center_y = width // 2, height // 2
    max_dist = math.sqrt(center_x ** 2 + center_y ** 2)
    if max_dist == 0:
        return 0
    dx, dy = x - center_x, y - center_y
    dist = math.sqrt(dx * dx + dy * dy)
    intensity = max(0.0, math.sin(math.atan2(dy, dx) * 10) * (1.0 - dist / max_dist)) * 100
    return int(intensity)


def test_solar_rays_2x2_stays_in_range():
    buffer = filled(2, 2, (250, 100, 0, 77))

    solar_rays(buffer)

    for y in range(2):
        for x in range(2):
            r, g, b, a = buffer.get_pixel(x, y)
            assert r <= 255 and g <= 255 and b <= 255
            assert a == 77


def test_solar_rays_brightens_around_center():
    buffer = filled(64, 64, (100, 100, 100, 255))

    solar_rays(buffer)

    rgb = buffer.data[:, :, :3].astype(int)
    assert (rgb >= 100).all()
    assert (rgb > 100).any()
    # Rays are additive and equal on all three channels
    assert (buffer.data[:, :, 0] == buffer.data[:, :, 1]).all()
    assert (buffer.data[:, :, 3] == 255).all()


def test_solar_rays_matches_reference():
    width, height = 17, 11
    buffer = filled(width, height, (0, 0, 0, 255))

    solar_rays(buffer)

    for y in range(height):
        for x in range(width):
            expected = reference_solar_boost(x, y, width, height)
            # libm rounding may differ by one at truncation boundaries
            assert abs(buffer.get_pixel(x, y)[0] - expected) <= 1


def test_solar_rays_saturates():
    buffer = filled(32, 32, (250, 250, 250, 255))

    solar_rays(buffer)

    assert buffer.data.max() == 255
    assert (buffer.data[:, :, :3] >= 250).all()


def test_solar_rays_single_pixel_unchanged():
    buffer = filled(1, 1, (10, 20, 30, 40))

    solar_rays(buffer)

    assert buffer.get_pixel(0, 0) == (10, 20, 30, 40)


# ---------------------------------------------------------------- wave distortion

def test_wave_zero_amplitude_is_identity():
    buffer = create_test_image()
    before = buffer.copy()

    wave_distortion(buffer, 0.0)

    assert buffer == before


def test_wave_changes_image():
    buffer = create_test_image()
    before = buffer.copy()

    wave_distortion(buffer, 15.0)

    assert buffer != before


def test_wave_samples_from_snapshot():
    """Every output pixel comes from the pre-filter image or is the sentinel"""
    buffer = create_test_image(40, 30)
    before = buffer.copy()
    amplitude = 6.0

    wave_distortion(buffer, amplitude)

    for y in range(30):
        offset_x = int(amplitude * math.sin(2 * math.pi * y / 128.0))
        for x in range(40):
            offset_y = int(amplitude * math.cos(2 * math.pi * x / 128.0))
            assert buffer.get_pixel(x, y) == before.get_pixel(x + offset_x, y + offset_y)


def test_wave_edge_samples_use_sentinel():
    buffer = filled(10, 10, (200, 200, 200, 100))

    wave_distortion(buffer, 15.0)

    # (0, 0) samples (0, 15), below the image
    assert buffer.get_pixel(0, 0) == SENTINEL_COLOR


def test_wave_huge_amplitude_samples_outside():
    buffer = create_test_image(16, 12)

    wave_distortion(buffer, 1e20)

    # Row 0 has no horizontal offset, every other row and every column here
    # is pushed far outside the image
    assert buffer == filled(16, 12, SENTINEL_COLOR)


def test_wave_rejects_non_finite_amplitude():
    with pytest.raises(ValueError):
        wave_distortion(create_test_image(4, 4), float('nan'))


# ---------------------------------------------------------------- color noise

def test_noise_zero_intensity_is_identity():
    buffer = create_test_image()
    before = buffer.copy()

    color_noise(buffer, 0.0, np.random.default_rng(99))

    assert buffer == before


def test_noise_zero_intensity_still_consumes_draws():
    rng = np.random.default_rng(3)
    untouched = np.random.default_rng(3)

    color_noise(create_test_image(5, 4), 0.0, rng)

    assert rng.bit_generator.state != untouched.bit_generator.state


def test_noise_matches_reference():
    buffer = create_test_image(12, 9)
    before = buffer.to_array().astype(np.int64)
    intensity = 0.02

    color_noise(buffer, intensity, np.random.default_rng(5))

    draws = np.random.default_rng(5).integers(-250, 250, size=(9, 12, 3), endpoint=True)
    noise = np.trunc(draws * (intensity * 3.5)).astype(np.int64)
    expected_rgb = np.clip(before[:, :, :3] + noise, 0, 255)

    np.testing.assert_array_equal(buffer.data[:, :, :3], expected_rgb)
    np.testing.assert_array_equal(buffer.data[:, :, 3], before[:, :, 3])


def test_noise_is_reproducible_with_seed():
    first = create_test_image()
    second = create_test_image()

    color_noise(first, 0.5, np.random.default_rng(42))
    color_noise(second, 0.5, np.random.default_rng(42))

    assert first == second
    assert first != create_test_image()


def test_noise_huge_intensity_saturates_by_sign():
    """Very large factors push each channel to the end matching its draw's sign"""
    buffer = filled(4, 4, (128, 128, 128, 255))

    color_noise(buffer, 1e17, np.random.default_rng(0))

    draws = np.random.default_rng(0).integers(-250, 250, size=(4, 4, 3), endpoint=True)
    expected = np.where(draws > 0, 255, np.where(draws < 0, 0, 128))
    np.testing.assert_array_equal(buffer.data[:, :, :3], expected)
    assert (buffer.data[:, :, 3] == 255).all()


# ---------------------------------------------------------------- glitch

def column_coded_image(width, height):
    """Blue channel holds the column index so moves can be traced"""
    array = np.zeros((height, width, 4), dtype=np.uint8)
    array[:, :, 0] = 100
    array[:, :, 1] = 100
    array[:, :, 2] = np.arange(width, dtype=np.uint8)[None, :]
    array[:, :, 3] = 255
    return PixelBuffer.from_array(array)


def test_glitch_rows_are_permutations():
    width, height = 37, 45
    buffer = column_coded_image(width, height)

    glitch(buffer, np.random.default_rng(11))

    for y in range(0, height, 10):
        columns = sorted(int(v) for v in buffer.data[y, :, 2])
        assert columns == list(range(width))


def test_glitch_matches_rotation_and_boosts():
    width, height = 30, 95
    buffer = create_test_image(width, height)
    before = buffer.to_array()

    glitch(buffer, np.random.default_rng(8))

    shifts = np.random.default_rng(8).integers(0, 20, size=10, endpoint=True)
    for y in range(height):
        if y % 10 != 0:
            np.testing.assert_array_equal(buffer.data[y], before[y])
            continue

        row = before[y].astype(np.int64)
        if y % 20 == 0:
            row[:, 0] = np.minimum(255, row[:, 0] + 50)
        elif y % 15 == 0:
            row[:, 1] = np.minimum(255, row[:, 1] + 50)

        expected = np.roll(row, shifts[y // 10], axis=0)
        np.testing.assert_array_equal(buffer.data[y], expected)


def test_glitch_boost_rows():
    buffer = filled(8, 31, (100, 100, 100, 255))

    glitch(buffer, np.random.default_rng(0))

    assert buffer.get_pixel(0, 0) == (150, 100, 100, 255)
    assert buffer.get_pixel(0, 10) == (100, 100, 100, 255)
    assert buffer.get_pixel(0, 20) == (150, 100, 100, 255)
    assert buffer.get_pixel(0, 30) == (100, 150, 100, 255)
    assert buffer.get_pixel(0, 5) == (100, 100, 100, 255)


def test_glitch_zero_width_rows():
    buffer = PixelBuffer(0, 25)

    glitch(buffer, np.random.default_rng(0))

    assert buffer.size == (0, 25)


# ---------------------------------------------------------------- grayscale

def test_grayscale_uniform_gray_unchanged():
    buffer = filled(4, 4, (100, 100, 100, 255))

    grayscale(buffer)

    assert buffer == filled(4, 4, (100, 100, 100, 255))


def test_grayscale_equal_channels_and_alpha():
    buffer = create_test_image()
    alpha = buffer.data[:, :, 3].copy()

    grayscale(buffer)

    assert (buffer.data[:, :, 0] == buffer.data[:, :, 1]).all()
    assert (buffer.data[:, :, 1] == buffer.data[:, :, 2]).all()
    np.testing.assert_array_equal(buffer.data[:, :, 3], alpha)


def test_grayscale_is_idempotent():
    buffer = create_test_image()

    grayscale(buffer)
    once = buffer.copy()
    grayscale(buffer)

    assert buffer == once


def test_grayscale_every_gray_level_is_fixed_point():
    levels = np.arange(256, dtype=np.uint8)
    array = np.stack([levels, levels, levels, np.full(256, 255, dtype=np.uint8)], axis=1)[None, :, :]
    buffer = PixelBuffer.from_array(array)

    grayscale(buffer)

    np.testing.assert_array_equal(buffer.data[0, :, 0], levels)


def test_grayscale_luma_weights():
    buffer = PixelBuffer(3, 1)
    buffer.set_pixel(0, 0, (255, 0, 0, 255))
    buffer.set_pixel(1, 0, (0, 255, 0, 255))
    buffer.set_pixel(2, 0, (0, 0, 255, 255))

    grayscale(buffer)

    assert buffer.get_pixel(0, 0)[0] == 76   # 76.245
    assert buffer.get_pixel(1, 0)[0] == 150  # 149.685
    assert buffer.get_pixel(2, 0)[0] == 29   # 29.07
