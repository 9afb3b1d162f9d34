import numpy as np
import pytest

from ppmsteg import ppm


def make_ppm_bytes(width: int, height: int, seed: int = 0, header: bytes | None = None) -> bytes:
    rng = np.random.default_rng(seed)
    pixels = rng.integers(0, 256, size=3 * width * height, dtype=np.uint8).tobytes()
    if header is None:
        header = f"P6\n{width} {height}\n255\n".encode("ascii")
    return header + pixels


@pytest.fixture
def cover_bytes() -> bytes:
    return make_ppm_bytes(100, 100)


@pytest.fixture
def cover(cover_bytes) -> ppm.RasterImage:
    return ppm.parse(cover_bytes, id="cover.ppm")


@pytest.fixture
def cover_path(tmp_path, cover_bytes):
    path = tmp_path / "cover.ppm"
    path.write_bytes(cover_bytes)
    return path
