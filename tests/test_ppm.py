import io

import numpy as np
import pytest
from PIL import Image

from ppmsteg import ppm
from ppmsteg.errors import ErrorKind, FormatError

from conftest import make_ppm_bytes


def test_parse_fields(cover):
    assert cover.width == 100
    assert cover.height == 100
    assert cover.max_color == 255
    assert bytes(cover.header_bytes) == b"P6\n100 100\n255\n"
    assert len(cover.pixel_bytes) == 30000
    assert str(cover) == "ppm: 100x100"


@pytest.mark.parametrize("header", [
    b"P6\n3 2\n255\n",
    b"P6 3 2 255 ",
    b"P6\t\t3\r\n2  255\r",
    b"P63 2 255\n",
])
def test_serialize_is_identity(header):
    data = make_ppm_bytes(3, 2, header=header)
    assert ppm.serialize(ppm.parse(data)) == data


def test_parse_accepts_memoryview():
    data = make_ppm_bytes(4, 4)
    assert ppm.serialize(ppm.parse(memoryview(data))) == data


def test_parse_pillow_output():
    arr = np.arange(5 * 7 * 3, dtype=np.uint8).reshape(7, 5, 3)
    buf = io.BytesIO()
    Image.fromarray(arr).save(buf, format="PPM")
    image = ppm.parse(buf.getvalue())
    assert (image.width, image.height) == (5, 7)
    assert np.array_equal(ppm.to_array(image), arr)
    assert ppm.to_pil(image).size == (5, 7)


@pytest.mark.parametrize("data", [
    b"",
    b"P",
    make_ppm_bytes(2, 2, header=b"P3\n2 2\n255\n"),
    make_ppm_bytes(2, 2, header=b"Q6\n2 2\n255\n"),
    make_ppm_bytes(2, 2, header=b"p6\n2 2\n255\n"),
    b"P6\n0 2\n255\n",
    make_ppm_bytes(2, 2, header=b"P6\n2 2\n15\n"),
    make_ppm_bytes(2, 2, header=b"P6\n2 2\n65535\n"),
    make_ppm_bytes(2, 2)[:-1],
    make_ppm_bytes(2, 2) + b"\x00",
    b"P6\n2 x\n255\n" + bytes(12),
    b"P6\n2 2\n",
    b"P6\n2 2\n255",
    b"P6\n2 2\n255X" + bytes(12),
    b"P6\n-2 2\n255\n" + bytes(12),
    b"P6 " + b"1" * 5000 + b" 1 255\n" + bytes(3),
    b"P6 1 " + b"9" * 30 + b" 255\n" + bytes(3),
])
def test_parse_rejects_malformed(data):
    with pytest.raises(FormatError) as excinfo:
        ppm.parse(data, id="bad.ppm")
    assert excinfo.value.kind is ErrorKind.BAD_FORMAT
    assert str(excinfo.value).startswith("BAD_FORMAT: bad.ppm: ")


def test_zero_height_rejected():
    with pytest.raises(FormatError):
        ppm.parse(b"P6\n2 0\n255\n")


def test_clone_does_not_alias(cover):
    copy = ppm.clone(cover)
    assert copy.pixel_bytes == cover.pixel_bytes
    assert copy.header_bytes == cover.header_bytes
    assert copy.pixel_bytes is not cover.pixel_bytes
    assert copy.header_bytes is not cover.header_bytes
    copy.pixel_bytes[0] ^= 0xFF
    copy.header_bytes[0] = ord("X")
    assert copy.pixel_bytes[0] != cover.pixel_bytes[0]
    assert cover.header_bytes[0] == ord("P")
    assert copy.id == cover.id


def test_constructor_copies_buffers():
    pixels = bytearray(6)
    image = ppm.RasterImage(2, 1, 255, bytearray(b"P6 2 1 255\n"), pixels)
    pixels[0] = 7
    assert image.pixel_bytes[0] == 0


def test_constructor_checks_pixel_count():
    with pytest.raises(FormatError):
        ppm.RasterImage(2, 1, 255, b"P6 2 1 255\n", bytes(5))


def test_meta(cover):
    assert ppm.meta(cover) == {
        "width": 100,
        "height": 100,
        "max_color": 255,
        "n_header_bytes": 15,
        "n_pixel_bytes": 30000,
    }


def test_read_write_ppm(tmp_path, cover):
    path = tmp_path / "out.ppm"
    ppm.write_ppm(str(path), cover)
    back = ppm.read_ppm(str(path))
    assert back.id == "out.ppm"
    assert ppm.serialize(back) == ppm.serialize(cover)


def test_leading_zeros_in_header():
    data = b"P6 " + b"0" * 50 + b"2 1 255\n" + bytes(6)
    image = ppm.parse(data)
    assert (image.width, image.height) == (2, 1)
    assert ppm.serialize(image) == data


@pytest.mark.parametrize("width, height, max_color", [
    (-1, -2, 255),
    (0, 2, 255),
    (2, 0, 255),
    (1, 2, 15),
])
def test_constructor_checks_header_fields(width, height, max_color):
    with pytest.raises(FormatError):
        ppm.RasterImage(width, height, max_color, b"P6\n", bytes(6))
