"""
Unit tests for the inline image encoders.
"""

import base64
import io

import numpy as np
import pytest
from PIL import Image

from fontview.core.exceptions import CapabilityError, UnsupportedTerminalError
from fontview.terminal.encoders import (
    ItermEncoder,
    KittyEncoder,
    SixelEncoder,
    _run_length,
    encoder_for,
)
from fontview.terminal.negotiator import Protocol


@pytest.fixture
def image():
    img = Image.new("RGB", (20, 13), "white")
    img.paste((200, 0, 0), (5, 3, 15, 10))
    return img


def _decode_png(data: bytes) -> Image.Image:
    return Image.open(io.BytesIO(base64.standard_b64decode(data)))


class TestKittyEncoder:
    """Test Kitty graphics protocol framing."""

    def test_single_chunk(self, image):
        data = KittyEncoder().encode(image)

        assert data.startswith(b"\x1b_Ga=T,f=100,m=0;")
        assert data.endswith(b"\x1b\\")
        assert data.count(b"\x1b_G") == 1
        payload = data[len(b"\x1b_Ga=T,f=100,m=0;") : -2]
        assert _decode_png(payload).size == image.size

    def test_chunked(self, image):
        """Large payloads split into chunks with continuation flags."""
        data = KittyEncoder(chunk_size=64).encode(image)
        frames = [frame for frame in data.split(b"\x1b\\") if frame]

        assert len(frames) > 1
        assert frames[0].startswith(b"\x1b_Ga=T,f=100,m=1;")
        assert all(frame.startswith(b"\x1b_Gm=1;") for frame in frames[1:-1])
        assert frames[-1].startswith(b"\x1b_Gm=0;")

        payload = b"".join(frame.split(b";", 1)[1] for frame in frames)
        assert all(len(frame.split(b";", 1)[1]) <= 64 for frame in frames)
        assert _decode_png(payload).size == image.size


class TestItermEncoder:
    """Test iTerm2 inline image framing."""

    def test_encode(self, image):
        data = ItermEncoder().encode(image)

        assert data.startswith(b"\x1b]1337;File=inline=1;size=")
        assert b";width=20px;height=13px;preserveAspectRatio=1:" in data
        assert data.endswith(b"\x07")
        payload = data.split(b":", 1)[1][:-1]
        assert _decode_png(payload).size == image.size

    def test_size_is_png_length(self, image):
        data = ItermEncoder().encode(image)
        header, payload = data.split(b":", 1)
        size = int(header.split(b"size=")[1].split(b";")[0])
        assert size == len(base64.standard_b64decode(payload[:-1]))


class TestSixelEncoder:
    """Test DEC Sixel encoding."""

    def test_framing(self, image):
        data = SixelEncoder().encode(image)

        assert data.startswith(b'\x1bPq"1;1;20;13')
        assert data.endswith(b"\x1b\\")
        # 13 rows make three six-pixel bands
        assert data.count(b"-") == 3

    def test_palette(self, image):
        text = SixelEncoder().encode(image).decode("ascii")
        assert ";2;100;100;100" in text
        assert ";2;78;0;0" in text

    def test_palettized_input_kept(self):
        indexed = Image.new("P", (4, 6), 0)
        indexed.putpalette([0, 0, 0] + [255, 255, 255] * 255)
        data = SixelEncoder().encode(indexed).decode("ascii")
        assert "#0;2;0;0;0" in data
        assert "#0!4~" in data

    @pytest.mark.parametrize(
        ("bits", "expected"),
        [
            ([0, 0, 0, 0], ""),
            ([1, 1, 1, 1, 1], "!5@"),
            ([1, 1, 0, 2], "@@?A"),
            ([63, 0, 0], "~"),
        ],
    )
    def test_run_length(self, bits, expected):
        assert _run_length(np.array(bits)) == expected


class TestEncoderFor:
    """Test encoder selection."""

    @pytest.mark.parametrize(
        ("protocol", "encoder_class"),
        [
            (Protocol.KITTY, KittyEncoder),
            (Protocol.ITERM, ItermEncoder),
            (Protocol.SIXEL, SixelEncoder),
        ],
    )
    def test_supported(self, protocol, encoder_class):
        encoder = encoder_for(protocol)
        assert isinstance(encoder, encoder_class)
        assert encoder.protocol is protocol

    def test_unsupported(self):
        with pytest.raises(UnsupportedTerminalError) as exc_info:
            encoder_for(Protocol.UNSUPPORTED)
        assert isinstance(exc_info.value, CapabilityError)
        assert str(exc_info.value) == "terminal does not support graphics"
