from __future__ import annotations

import numpy as np
import pytest

from util.color import HSL, RGB, pack_array, pack_rgb, to_rgb, unpack_array, unpack_rgb


def test_rgb_helpers() -> None:
    assert RGB.gray(7) == RGB(7, 7, 7)
    assert RGB.from_hex("#ff8000") == RGB(255, 128, 0)
    assert RGB.from_hex("0x0000FF", depth=65535) == RGB(0, 0, 65535)
    with pytest.raises(ValueError):
        RGB.from_hex("#fff")


def test_hsl_primary_colors() -> None:
    assert HSL(0.0, 1.0, 0.5).to_rgb() == RGB(255, 0, 0)
    assert HSL(120.0, 1.0, 0.5).to_rgb() == RGB(0, 255, 0)
    assert HSL(240.0, 1.0, 0.5).to_rgb(depth=100) == RGB(0, 0, 100)
    assert HSL(0.0, 0.0, 1.0).to_rgb() == RGB(255, 255, 255)


def test_to_rgb_normalizes_inputs() -> None:
    assert to_rgb([1, 2, 3]) == RGB(1, 2, 3)
    assert to_rgb(RGB(4, 5, 6)) is not None
    with pytest.raises(ValueError):
        to_rgb(42)


def test_pack_roundtrip_keeps_16bit_channels() -> None:
    c = RGB(65535, 1, 300)
    assert unpack_rgb(pack_rgb(c)) == c
    arr = np.array([[1, 2, 3], [65535, 0, 256]])
    np.testing.assert_array_equal(unpack_array(pack_array(arr)), arr)
