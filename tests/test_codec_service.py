import logging

import pytest

from pnmlab.models.errors import MalformedHeaderError, MalformedPixelDataError
from pnmlab.models.image_model import PnmImage, image_of_size
from pnmlab.models.pixel import BiLevelPixel, FormatTag, GrayPixel, RgbPixel
from pnmlab.services.codec_service import PnmCodec


@pytest.fixture
def codec():
    return PnmCodec()


# ---- parse ----

def test_parse_bilevel(codec):
    image = codec.parse(["P1", "3 2", "0 1 0", "1 0 5"])
    assert image.format is FormatTag.BILEVEL
    assert (image.width, image.height, image.max_value) == (3, 2, 1)
    assert image.pixels == [
        [BiLevelPixel(False), BiLevelPixel(True), BiLevelPixel(False)],
        [BiLevelPixel(True), BiLevelPixel(False), BiLevelPixel(True)],
    ]


def test_parse_grayscale(codec):
    image = codec.parse(["P2", "2 2", "15", "0  7", "\t15 3 "])
    assert image.format is FormatTag.GRAYSCALE
    assert image.max_value == 15
    assert image.pixels == [[GrayPixel(0), GrayPixel(7)], [GrayPixel(15), GrayPixel(3)]]


def test_parse_grayscale_passes_through_values_above_max(codec):
    image = codec.parse(["P2", "1 1", "10", "42"])
    assert image.get_pixel(0, 0) == GrayPixel(42)


def test_parse_rgb_groups_triplets_and_drops_partial(codec):
    image = codec.parse(["P3", "2 1", "255", "1 2 3 4 5 6 7 8"])
    assert image.pixels == [[RgbPixel(1, 2, 3), RgbPixel(4, 5, 6)]]


def test_parse_ignores_extra_dimension_tokens(codec):
    image = codec.parse(["P1", "1 1 99", "1"])
    assert (image.width, image.height) == (1, 1)


def test_declared_height_is_metadata_only(codec):
    image = codec.parse(["P1", "2 5", "1 0", "0 1"])
    assert image.height == 5
    assert len(image.pixels) == 2


def test_grid_taller_than_declared_height_is_kept(codec):
    image = codec.parse(["P2", "1 1", "9", "1", "2", "3"])
    assert image.height == 1
    assert image.pixels == [[GrayPixel(1)], [GrayPixel(2)], [GrayPixel(3)]]


def test_whitespace_only_row_yields_empty_row(codec):
    image = codec.parse(["P1", "1 2", "1", "   "])
    assert image.pixels == [[BiLevelPixel(True)], []]


@pytest.mark.parametrize(
    "lines",
    [
        [],
        ["P9", "1 1", "1"],
        ["P", "1 1", "1"],
        ["1 1", "P1", "1"],
        ["P1", "1 1"],
        ["P1"],
        ["P1", "1", "1"],
        ["P1", "a b", "1"],
        ["P1", "0 1", "1"],
        ["P1", "1 -1", "1"],
        ["P2", "1 1", "x", "1"],
        ["P2", "1 1", "0", "1"],
        ["P3", "1 1", "", "1 2 3"],
    ],
)
def test_malformed_header(codec, lines):
    with pytest.raises(MalformedHeaderError):
        codec.parse(lines)


def test_grayscale_without_pixel_rows_is_accepted(codec):
    image = codec.parse(["P2", "1 1", "255"])
    assert image.pixels == []


def test_malformed_pixel_token(codec):
    with pytest.raises(MalformedPixelDataError):
        codec.parse(["P2", "2 1", "255", "1 two"])


# ---- serialize ----

def test_serialize_bilevel(codec):
    image = PnmImage(FormatTag.BILEVEL, 2, 2, [
        [BiLevelPixel(True), BiLevelPixel(False)],
        [BiLevelPixel(False), BiLevelPixel(True)],
    ])
    assert codec.serialize(image) == "P1\n2 2\n1 0\n0 1\n"


def test_serialize_grayscale_includes_max_value(codec):
    image = PnmImage(FormatTag.GRAYSCALE, 2, 1, [[GrayPixel(3), GrayPixel(12)]], 12)
    assert codec.to_lines(image) == ["P2", "2 1", "12", "3 12"]


def test_serialize_rgb_emits_three_tokens_per_pixel(codec):
    image = PnmImage(FormatTag.RGB, 2, 1, [[RgbPixel(1, 2, 3), RgbPixel(4, 5, 6)]], 255)
    lines = codec.to_lines(image)
    assert lines[-1] == "1 2 3 4 5 6"
    assert len(lines[-1].split()) == 3 * image.width


# ---- round trip ----

@pytest.mark.parametrize(
    "image",
    [
        PnmImage(FormatTag.BILEVEL, 3, 1, [[BiLevelPixel(True), BiLevelPixel(False), BiLevelPixel(True)]]),
        PnmImage(FormatTag.GRAYSCALE, 2, 2, [[GrayPixel(0), GrayPixel(65535)], [GrayPixel(1), GrayPixel(2)]], 65535),
        PnmImage(FormatTag.RGB, 1, 2, [[RgbPixel(7, 0, 3)], [RgbPixel(0, 0, 7)]], 7),
    ],
    ids=["bilevel", "grayscale", "rgb"],
)
def test_round_trip(codec, image):
    assert codec.parse(codec.serialize(image).splitlines()) == image


def test_round_trip_after_drawing(codec):
    canvas = image_of_size(5, 4, FormatTag.RGB, max_value=31)
    canvas.draw_line((0, 3), (4, 0))
    assert codec.parse(codec.serialize(canvas).splitlines()) == canvas


@pytest.mark.parametrize(
    "lines, error",
    [
        (["P7", "1 1", "1"], MalformedHeaderError),
        (["P2", "1 1", "x", "1"], MalformedHeaderError),
        (["P2", "2 1", "255", "1 two"], MalformedPixelDataError),
    ],
)
def test_parse_failures_are_logged_at_debug(codec, caplog, lines, error):
    with caplog.at_level(logging.DEBUG, logger="pnmlab.services.codec_service"):
        with pytest.raises(error):
            codec.parse(lines)
    assert [r.levelno for r in caplog.records] == [logging.DEBUG]
    assert caplog.records[0].getMessage().startswith("Parse failed:")
