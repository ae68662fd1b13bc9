"""Raster image data structures."""

from __future__ import annotations

from enum import Enum

from PIL import Image
from pydantic import BaseModel, Field, model_validator


class PixelFormat(str, Enum):
    RGB = "rgb"
    RGBA = "rgba"

    @property
    def bytes_per_pixel(self) -> int:
        return 3 if self is PixelFormat.RGB else 4

    @property
    def pil_mode(self) -> str:
        return self.value.upper()


class RasterImage(BaseModel):
    """An owned 8-bit pixel buffer with explicit dimensions and format."""

    width: int = Field(gt=0)
    height: int = Field(gt=0)
    pixel_format: PixelFormat = PixelFormat.RGBA
    data: bytes = Field(repr=False)

    @model_validator(mode="after")
    def check_buffer_size(self) -> "RasterImage":
        expected = self.width * self.height * self.pixel_format.bytes_per_pixel
        if len(self.data) != expected:
            raise ValueError(
                f"{self.pixel_format.value} buffer for {self.width}x{self.height} "
                f"needs {expected} bytes, got {len(self.data)}"
            )
        return self

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @classmethod
    def from_pil(cls, image: Image.Image) -> "RasterImage":
        """Copy a Pillow image. Modes other than RGB and RGBA become RGBA."""
        if image.mode not in ("RGB", "RGBA"):
            image = image.convert("RGBA")
        return cls(
            width=image.width,
            height=image.height,
            pixel_format=PixelFormat(image.mode.lower()),
            data=image.tobytes(),
        )

    @classmethod
    def blank(cls, width: int, height: int) -> "RasterImage":
        """A fully transparent RGBA canvas."""
        return cls(width=width, height=height, pixel_format=PixelFormat.RGBA, data=bytes(width * height * 4))

    def to_pil(self) -> Image.Image:
        return Image.frombytes(self.pixel_format.pil_mode, self.size, self.data)

    def to_rgba(self) -> "RasterImage":
        if self.pixel_format is PixelFormat.RGBA:
            return self
        return RasterImage.from_pil(self.to_pil().convert("RGBA"))
