import pytest

from pnmlab.models.errors import OutOfBoundsError
from pnmlab.models.image_model import PnmImage, image_of_size
from pnmlab.models.pixel import FormatTag, GrayPixel, RgbPixel
from pnmlab.services.raster_service import RasterService


def test_diagonal_line(on_cells):
    canvas = image_of_size(4, 4)
    canvas.draw_line((0, 0), (3, 3))
    assert on_cells(canvas) == [(0, 0), (1, 1), (2, 2), (3, 3)]


def test_horizontal_line(on_cells):
    canvas = image_of_size(4, 4)
    canvas.draw_line((0, 2), (3, 2))
    assert on_cells(canvas) == [(2, 0), (2, 1), (2, 2), (2, 3)]


def test_vertical_line(on_cells):
    canvas = image_of_size(4, 4)
    canvas.draw_line((1, 0), (1, 3))
    assert on_cells(canvas) == [(0, 1), (1, 1), (2, 1), (3, 1)]


def test_single_point(on_cells):
    canvas = image_of_size(3, 3)
    canvas.draw_line((2, 1), (2, 1))
    assert on_cells(canvas) == [(1, 2)]


def test_reversed_direction_matches_forward(on_cells):
    forward = image_of_size(6, 6)
    forward.draw_line((0, 1), (5, 4))
    backward = image_of_size(6, 6)
    backward.draw_line((5, 4), (0, 1))
    assert on_cells(forward) == on_cells(backward)


def test_anti_diagonal(on_cells):
    canvas = image_of_size(4, 4)
    canvas.draw_line((0, 3), (3, 0))
    assert on_cells(canvas) == [(0, 3), (1, 2), (2, 1), (3, 0)]


def test_steep_line_has_no_gaps(on_cells):
    canvas = image_of_size(3, 8)
    canvas.draw_line((0, 0), (2, 7))
    rows = {r for r, _c in on_cells(canvas)}
    assert rows == set(range(8))


def test_half_rounds_away_from_zero():
    # m = 0.5: x=1 -> y=0.5 -> 1, x=3 -> y=1.5 -> 2
    cells = RasterService().line_cells((0, 0), (4, 2))
    column_pass = cells[:5]
    row_pass = cells[5:]
    assert column_pass == [(0, 0), (1, 1), (1, 2), (2, 3), (2, 4)]
    assert row_pass == [(0, 0), (1, 2), (2, 4)]


def test_grayscale_foreground_is_max_value():
    canvas = image_of_size(3, 1, FormatTag.GRAYSCALE, max_value=15)
    canvas.draw_line((0, 0), (2, 0))
    assert canvas.pixels == [[GrayPixel(15)] * 3]


def test_rgb_foreground_is_max_on_every_channel():
    canvas = image_of_size(1, 2, FormatTag.RGB, max_value=100)
    canvas.draw_line((0, 0), (0, 1))
    assert canvas.pixels == [[RgbPixel(100, 100, 100)], [RgbPixel(100, 100, 100)]]


@pytest.mark.parametrize(
    "start, end",
    [((0, 0), (4, 0)), ((-1, 0), (2, 2)), ((0, 0), (0, 4)), ((1, 1), (1, -1))],
)
def test_out_of_bounds_endpoint_leaves_canvas_untouched(start, end):
    canvas = image_of_size(4, 4)
    before = canvas.copy()
    with pytest.raises(OutOfBoundsError):
        canvas.draw_line(start, end)
    assert canvas == before


def test_short_parsed_grid_is_out_of_bounds():
    # declared 2x3 but only one row present
    image = PnmImage(FormatTag.GRAYSCALE, 2, 3, [[GrayPixel(0), GrayPixel(0)]], 9, strict=False)
    with pytest.raises(OutOfBoundsError):
        image.draw_line((0, 0), (0, 2))
    assert image.pixels == [[GrayPixel(0), GrayPixel(0)]]


def test_redraw_is_idempotent(on_cells):
    canvas = image_of_size(5, 5)
    canvas.draw_line((0, 4), (4, 1))
    once = on_cells(canvas)
    canvas.draw_line((0, 4), (4, 1))
    assert on_cells(canvas) == once
