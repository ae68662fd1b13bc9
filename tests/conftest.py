"""Pytest configuration and shared fixtures."""

from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from twenty_twenty.models.config import ARTIFACTS_DIR_ENV_VAR, ENV_VAR, AssertConfig, Mode
from twenty_twenty.models.image import PixelFormat, RasterImage

WIDTH = 64
HEIGHT = 48


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make sure no mode leaks in from the developer's shell."""
    monkeypatch.delenv(ENV_VAR, raising=False)
    monkeypatch.delenv(ARTIFACTS_DIR_ENV_VAR, raising=False)


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from an empty directory holding the sample baselines under tests/."""
    monkeypatch.chdir(tmp_path)
    images_dir = tmp_path / "tests"
    images_dir.mkdir()
    dog1_image().save(images_dir / "dog1.png")
    dog2_image().save(images_dir / "dog2.png")
    grid_image().save(images_dir / "initial-grid.png")
    stripes_image().save(images_dir / "multiple-frames.png")
    return tmp_path


@pytest.fixture
def default_config() -> AssertConfig:
    return AssertConfig(mode=Mode.DEFAULT)


# ============================================================================
# Image Fixtures
# ============================================================================


def _textured(seed: int) -> np.ndarray:
    rng = np.random.default_rng(seed)
    y, x = np.mgrid[0:HEIGHT, 0:WIDTH]
    base = np.stack([x * 4, y * 5, (x + y) * 2], axis=-1).astype(np.int32)
    noise = rng.integers(0, 96, size=(HEIGHT, WIDTH, 3))
    return np.clip(base + noise, 0, 255).astype(np.uint8)


def dog1_image() -> Image.Image:
    """A textured RGB sample image."""
    return Image.fromarray(_textured(1), "RGB")


def dog2_image() -> Image.Image:
    """An unrelated textured RGB sample image."""
    return Image.fromarray(np.flipud(_textured(2)).copy(), "RGB")


def grid_image() -> Image.Image:
    """An opaque RGBA grid pattern."""
    arr = np.full((HEIGHT, WIDTH, 4), 255, dtype=np.uint8)
    arr[::8, :, :3] = 0
    arr[:, ::8, :3] = 0
    return Image.fromarray(arr, "RGBA")


def stripes_image() -> Image.Image:
    """Opaque RGBA diagonal stripes, unlike the grid."""
    y, x = np.mgrid[0:HEIGHT, 0:WIDTH]
    arr = np.zeros((HEIGHT, WIDTH, 4), dtype=np.uint8)
    arr[..., 0] = ((x + y) // 4 % 2) * 255
    arr[..., 2] = 128
    arr[..., 3] = 255
    return Image.fromarray(arr, "RGBA")


@pytest.fixture
def dog1() -> RasterImage:
    return RasterImage.from_pil(dog1_image())


@pytest.fixture
def grid() -> RasterImage:
    return RasterImage.from_pil(grid_image())


@pytest.fixture
def solid_rgb() -> RasterImage:
    """A 4x2 solid red RGB image."""
    return RasterImage(width=4, height=2, pixel_format=PixelFormat.RGB, data=bytes([255, 0, 0]) * 8)


# ============================================================================
# H.264 Fixtures
# ============================================================================


def encode_h264(frames: list[np.ndarray], path: Path) -> bytes:
    """Encode RGB frames as a raw H.264 elementary stream.

    QP 0 makes the encode lossless in YUV space, so the first frame decodes to
    the same pixels however many frames follow it.
    """
    av = pytest.importorskip("av")
    try:
        av.Codec("libx264", "w")
    except Exception:
        pytest.skip("libx264 encoder not available")

    height, width = frames[0].shape[:2]
    with av.open(str(path), mode="w", format="h264") as out:
        stream = out.add_stream("libx264", rate=1, options={"qp": "0", "preset": "ultrafast"})
        stream.width = width
        stream.height = height
        stream.pix_fmt = "yuv420p"
        for index, arr in enumerate(frames):
            frame = av.VideoFrame.from_ndarray(arr, format="rgb24")
            frame.pts = index
            for packet in stream.encode(frame):
                out.mux(packet)
        for packet in stream.encode():
            out.mux(packet)
    return path.read_bytes()


@pytest.fixture
def h264_single(tmp_path: Path) -> bytes:
    """One H.264 frame of the dog1 sample."""
    return encode_h264([_textured(1)], tmp_path / "single.h264")


@pytest.fixture
def h264_multi(tmp_path: Path) -> bytes:
    """Three H.264 frames, the first being the dog1 sample."""
    frames = [_textured(1), np.flipud(_textured(2)).copy(), _textured(3)]
    return encode_h264(frames, tmp_path / "multi.h264")
