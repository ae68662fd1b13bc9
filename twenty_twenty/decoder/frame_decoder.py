"""Frame decoder — turns one compressed video frame into a raster image.

The byte buffer is handed to FFmpeg (through PyAV) as an in-memory file, so no
temporary file is ever written. Decoding runs a fixed sequence of stages and
aborts on the first failure with a DecodeError naming that stage:

    OPEN_CONTAINER -> LOCATE_BEST_VIDEO_STREAM -> INIT_DECODER -> SUBMIT_PACKET
    -> RECEIVE_FRAME -> CONVERT_PIXEL_FORMAT -> FLUSH -> BUILD_IMAGE

Only the first decodable frame is significant. If the buffer encodes several
frames the rest are ignored.
"""

from __future__ import annotations

import io
import logging
from contextlib import contextmanager
from enum import Enum
from typing import Iterator, Optional

import av
from av.error import FFmpegError

from twenty_twenty.errors import DecodeError
from twenty_twenty.models.image import PixelFormat, RasterImage

logger = logging.getLogger(__name__)

TARGET_FORMAT = "rgb24"


class DecodeStage(str, Enum):
    OPEN_CONTAINER = "OPEN_CONTAINER"
    LOCATE_BEST_VIDEO_STREAM = "LOCATE_BEST_VIDEO_STREAM"
    INIT_DECODER = "INIT_DECODER"
    SUBMIT_PACKET = "SUBMIT_PACKET"
    RECEIVE_FRAME = "RECEIVE_FRAME"
    CONVERT_PIXEL_FORMAT = "CONVERT_PIXEL_FORMAT"
    FLUSH = "FLUSH"
    BUILD_IMAGE = "BUILD_IMAGE"


@contextmanager
def _stage(stage: DecodeStage) -> Iterator[None]:
    logger.debug("Decode stage %s", stage.value)
    try:
        yield
    except DecodeError:
        raise
    except (FFmpegError, ValueError, OSError) as e:
        raise DecodeError(stage.value, str(e)) from e


def decode_frame(
    data: bytes,
    width: Optional[int] = None,
    height: Optional[int] = None,
    container_format: str = "h264",
) -> RasterImage:
    """Decode the first frame of a compressed elementary stream into an RGB image.

    ``width`` and ``height`` scale the decoded frame to explicit dimensions;
    when omitted the frame keeps its coded size.
    """
    if not data:
        raise DecodeError(DecodeStage.OPEN_CONTAINER.value, "empty frame buffer")

    with _stage(DecodeStage.OPEN_CONTAINER):
        container = av.open(io.BytesIO(bytes(data)), mode="r", format=container_format)

    try:
        with _stage(DecodeStage.LOCATE_BEST_VIDEO_STREAM):
            stream = container.streams.best("video")
        if stream is None:
            raise DecodeError(DecodeStage.LOCATE_BEST_VIDEO_STREAM.value, "no video stream found")

        with _stage(DecodeStage.INIT_DECODER):
            # The stream's context already carries the container's codec parameters.
            decoder = stream.codec_context
            if decoder is None:
                raise DecodeError(DecodeStage.INIT_DECODER.value, f"no decoder for {stream.type} stream")
            decoder.open(strict=False)

        frame = None
        with _stage(DecodeStage.SUBMIT_PACKET):
            for packet in container.demux(stream):
                if packet.size == 0:
                    continue
                frames = decoder.decode(packet)
                if frames:
                    frame = frames[0]
                    break

        flushed = False
        with _stage(DecodeStage.RECEIVE_FRAME):
            if frame is None:
                # The decoder may hold the only frame back until it is drained.
                drained = decoder.decode(None)
                flushed = True
                frame = drained[0] if drained else None
        if frame is None:
            raise DecodeError(DecodeStage.RECEIVE_FRAME.value, "no frame could be decoded from the supplied data")

        target_width = frame.width if width is None else width
        target_height = frame.height if height is None else height
        if target_width <= 0 or target_height <= 0:
            raise DecodeError(
                DecodeStage.CONVERT_PIXEL_FORMAT.value,
                f"target size must be positive, got {target_width}x{target_height}",
            )
        if frame.format.name != TARGET_FORMAT or (target_width, target_height) != (frame.width, frame.height):
            with _stage(DecodeStage.CONVERT_PIXEL_FORMAT):
                logger.debug(
                    "Converting %s %dx%d frame to %s %dx%d",
                    frame.format.name, frame.width, frame.height, TARGET_FORMAT, target_width, target_height,
                )
                frame = frame.reformat(width=target_width, height=target_height, format=TARGET_FORMAT)

        if not flushed:
            with _stage(DecodeStage.FLUSH):
                # Drain anything still buffered; only the first frame is kept.
                decoder.decode(None)

        with _stage(DecodeStage.BUILD_IMAGE):
            pixels = frame.to_ndarray().tobytes()
        return _build_image(pixels, frame.width, frame.height)
    finally:
        container.close()


def _build_image(pixels: bytes, width: int, height: int) -> RasterImage:
    expected = width * height * PixelFormat.RGB.bytes_per_pixel
    if len(pixels) < expected:
        raise DecodeError(
            DecodeStage.BUILD_IMAGE.value,
            f"decoded buffer holds {len(pixels)} bytes, {width}x{height} {TARGET_FORMAT} needs {expected}",
        )
    logger.debug("Decoded %dx%d frame", width, height)
    return RasterImage(width=width, height=height, pixel_format=PixelFormat.RGB, data=pixels[:expected])
