import pytest

from pnmlab.models.errors import InvalidArgumentError, OutOfBoundsError
from pnmlab.models.image_model import PnmImage, image_of_size
from pnmlab.models.pixel import BiLevelPixel, FormatTag, GrayPixel, RgbPixel


def _gray(rows, max_value=255):
    pixels = [[GrayPixel(v) for v in row] for row in rows]
    return PnmImage(FormatTag.GRAYSCALE, len(rows[0]), len(rows), pixels, max_value)


# ---- construction ----

def test_bilevel_max_value_forced_to_one():
    image = PnmImage(FormatTag.BILEVEL, 1, 1, [[BiLevelPixel(False)]], max_value=200)
    assert image.max_value == 1


def test_rejects_mixed_variants():
    with pytest.raises(InvalidArgumentError):
        PnmImage(FormatTag.GRAYSCALE, 2, 1, [[GrayPixel(1), RgbPixel(1, 1, 1)]], 255)


def test_strict_rejects_shape_mismatch():
    with pytest.raises(InvalidArgumentError):
        PnmImage(FormatTag.GRAYSCALE, 2, 2, [[GrayPixel(1), GrayPixel(2)]], 255)
    with pytest.raises(InvalidArgumentError):
        PnmImage(FormatTag.GRAYSCALE, 2, 1, [[GrayPixel(1)]], 255)


def test_non_strict_keeps_declared_height():
    image = PnmImage(FormatTag.GRAYSCALE, 1, 5, [[GrayPixel(1)]], 255, strict=False)
    assert image.height == 5
    assert image.grid_size == (1, 1)


@pytest.mark.parametrize("max_value", [0, -3])
def test_rejects_non_positive_max_value(max_value):
    with pytest.raises(InvalidArgumentError):
        PnmImage(FormatTag.GRAYSCALE, 1, 1, [[GrayPixel(0)]], max_value)


def test_dimensions_and_format_are_read_only():
    image = image_of_size(2, 2)
    with pytest.raises(AttributeError):
        image.width = 3
    with pytest.raises(AttributeError):
        image.format = FormatTag.RGB


def test_constructor_copies_rows():
    rows = [[GrayPixel(1)]]
    image = PnmImage(FormatTag.GRAYSCALE, 1, 1, rows, 255)
    rows[0][0] = GrayPixel(9)
    assert image.get_pixel(0, 0) == GrayPixel(1)


# ---- pixel access ----

def test_set_pixel_checks_variant_and_bounds():
    image = image_of_size(2, 2, FormatTag.GRAYSCALE)
    image.set_pixel(1, 0, GrayPixel(7))
    assert image.get_pixel(1, 0) == GrayPixel(7)
    with pytest.raises(InvalidArgumentError):
        image.set_pixel(0, 0, BiLevelPixel(True))
    with pytest.raises(OutOfBoundsError):
        image.set_pixel(2, 0, GrayPixel(1))
    with pytest.raises(OutOfBoundsError):
        image.get_pixel(0, -1)


# ---- image_of_size ----

def test_image_of_size_bilevel_background():
    image = image_of_size(3, 2)
    assert image.format is FormatTag.BILEVEL
    assert (image.width, image.height, image.max_value) == (3, 2, 1)
    assert all(p == BiLevelPixel(False) for row in image.pixels for p in row)


def test_image_of_size_other_formats():
    gray = image_of_size(2, 2, FormatTag.GRAYSCALE)
    assert gray.max_value == 255
    assert gray.get_pixel(1, 1) == GrayPixel(0)
    rgb = image_of_size(1, 1, FormatTag.RGB, max_value=15)
    assert rgb.max_value == 15
    assert rgb.get_pixel(0, 0) == RgbPixel(0, 0, 0)


@pytest.mark.parametrize("w, h", [(0, 1), (1, 0), (-2, 2)])
def test_image_of_size_rejects_bad_dimensions(w, h):
    with pytest.raises(InvalidArgumentError):
        image_of_size(w, h)


def test_image_of_size_rows_are_independent():
    image = image_of_size(2, 2)
    image.set_pixel(0, 0, BiLevelPixel(True))
    assert image.get_pixel(1, 0) == BiLevelPixel(False)


# ---- scaling ----

def test_scaled_dimensions_and_blocks():
    src = _gray([[1, 2, 3], [4, 5, 6]], max_value=9)
    factor = 3
    out = src.scaled(factor)
    assert (out.width, out.height) == (9, 6)
    assert out.format is FormatTag.GRAYSCALE
    assert out.max_value == 9
    for r in range(2):
        for c in range(3):
            for i in range(factor):
                for j in range(factor):
                    assert out.get_pixel(r * factor + i, c * factor + j) == src.get_pixel(r, c)


def test_scaled_identity():
    src = _gray([[1, 2], [3, 4]])
    out = src.scaled(1)
    assert out == src
    assert out is not src


def test_scaled_does_not_mutate_source():
    src = image_of_size(2, 2)
    before = src.copy()
    out = src.scaled(2)
    out.draw_line((0, 0), (3, 3))
    assert src == before


def test_scaled_rows_are_independent():
    out = image_of_size(1, 1).scaled(2)
    out.set_pixel(0, 0, BiLevelPixel(True))
    assert out.get_pixel(1, 0) == BiLevelPixel(False)


@pytest.mark.parametrize("factor", [0, -1, 1.5, True])
def test_scaled_rejects_invalid_factor(factor):
    with pytest.raises(InvalidArgumentError):
        image_of_size(2, 2).scaled(factor)


def test_scaled_rgb():
    src = PnmImage(FormatTag.RGB, 1, 1, [[RgbPixel(1, 2, 3)]], 255)
    out = src.scaled(2)
    assert out.pixels == [[RgbPixel(1, 2, 3)] * 2] * 2


# ---- equality ----

def test_equality_considers_metadata():
    a = _gray([[1]], max_value=10)
    b = _gray([[1]], max_value=11)
    assert a != b
    assert a == _gray([[1]], max_value=10)
