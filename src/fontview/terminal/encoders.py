"""
Inline Image Encoders
=====================

Frame a rendered image for one terminal graphics protocol. Exactly one
encoder is chosen per run by ``encoder_for`` and used through the uniform
``encode(image) -> bytes`` call.
"""

import base64
import io
import logging
from abc import ABC, abstractmethod

import numpy as np
from PIL import Image

from fontview.core.exceptions import UnsupportedTerminalError

from .negotiator import Protocol

logger = logging.getLogger(__name__)

ESC = b"\x1b"
ST = ESC + b"\\"
KITTY_CHUNK_SIZE = 4096
SIXEL_MAX_COLORS = 255


def encode_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


class ImageEncoder(ABC):
    """Encodes a raster image into protocol framed bytes."""

    protocol: Protocol

    @abstractmethod
    def encode(self, image: Image.Image) -> bytes:
        """Encode an image for the terminal."""


class KittyEncoder(ImageEncoder):
    """Kitty graphics protocol: base64 PNG in chunked APC escapes."""

    protocol = Protocol.KITTY

    def __init__(self, chunk_size: int = KITTY_CHUNK_SIZE):
        self.chunk_size = chunk_size

    def encode(self, image: Image.Image) -> bytes:
        payload = base64.standard_b64encode(encode_png(image))
        chunks = [
            payload[i : i + self.chunk_size] for i in range(0, len(payload), self.chunk_size)
        ] or [b""]

        out = bytearray()
        for i, chunk in enumerate(chunks):
            more = int(i < len(chunks) - 1)
            control = f"a=T,f=100,m={more}" if i == 0 else f"m={more}"
            out += ESC + b"_G" + control.encode() + b";" + chunk + ST
        return bytes(out)


class ItermEncoder(ImageEncoder):
    """iTerm2 inline images protocol (also understood by WezTerm)."""

    protocol = Protocol.ITERM

    def encode(self, image: Image.Image) -> bytes:
        png = encode_png(image)
        width, height = image.size
        header = (
            f"]1337;File=inline=1;size={len(png)};width={width}px;height={height}px;"
            "preserveAspectRatio=1:"
        )
        return ESC + header.encode() + base64.standard_b64encode(png) + b"\x07"


class SixelEncoder(ImageEncoder):
    """
    DEC Sixel graphics.

    The image is reduced to an adaptive palette with Floyd-Steinberg
    dithering, then written six pixel rows at a time, one pass per color with
    run-length compression.
    """

    protocol = Protocol.SIXEL

    def __init__(self, max_colors: int = SIXEL_MAX_COLORS):
        self.max_colors = max_colors

    def palettize(self, image: Image.Image) -> Image.Image:
        if image.mode == "P":
            return image
        rgb = image.convert("RGB")
        palette = rgb.quantize(colors=self.max_colors, method=Image.Quantize.MEDIANCUT)
        return rgb.quantize(palette=palette, dither=Image.Dither.FLOYDSTEINBERG)

    def encode(self, image: Image.Image) -> bytes:
        indexed = self.palettize(image)
        pixels = np.asarray(indexed, dtype=np.uint8)
        height, width = pixels.shape
        raw_palette = indexed.getpalette() or []

        out = [f'\x1bPq"1;1;{width};{height}']
        for index in np.unique(pixels).tolist():
            r, g, b = (raw_palette[3 * index : 3 * index + 3] + [0, 0, 0])[:3]
            out.append(
                f"#{index};2;{round(r * 100 / 255)};{round(g * 100 / 255)};{round(b * 100 / 255)}"
            )

        weights = (1 << np.arange(6, dtype=np.uint8)).reshape(6, 1)
        for top in range(0, height, 6):
            band = pixels[top : top + 6]
            passes = []
            for index in np.unique(band).tolist():
                mask = (band == index).astype(np.uint8)
                bits = (mask * weights[: mask.shape[0]]).sum(axis=0)
                passes.append(f"#{index}" + _run_length(bits))
            out.append("$".join(passes))
            out.append("-")

        out.append("\x1b\\")
        return "".join(out).encode("ascii")


def _run_length(bits: np.ndarray) -> str:
    """Encode one color pass of a sixel band with '!' repeat introducers."""
    chars = (bits + 63).astype(np.uint8)
    boundaries = np.flatnonzero(np.diff(chars)) + 1
    starts = np.concatenate(([0], boundaries))
    lengths = np.diff(np.concatenate((starts, [len(chars)])))

    # trailing blank sixels are implied
    if len(starts) and chars[starts[-1]] == 63:
        starts, lengths = starts[:-1], lengths[:-1]

    parts = []
    for start, length in zip(starts, lengths, strict=True):
        char = chr(chars[start])
        parts.append(f"!{length}{char}" if length > 3 else char * int(length))
    return "".join(parts)


_ENCODERS: dict[Protocol, type[ImageEncoder]] = {
    Protocol.KITTY: KittyEncoder,
    Protocol.ITERM: ItermEncoder,
    Protocol.SIXEL: SixelEncoder,
}


def encoder_for(protocol: Protocol) -> ImageEncoder:
    """
    Get the encoder for a negotiated protocol.

    Raises:
        CapabilityError: If the protocol is ``Protocol.UNSUPPORTED``
    """
    encoder_class = _ENCODERS.get(protocol)
    if encoder_class is None:
        raise UnsupportedTerminalError()
    logger.debug(f"Using {encoder_class.__name__}")
    return encoder_class()
