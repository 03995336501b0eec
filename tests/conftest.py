"""Shared test fixtures for feature explorer tests."""

import base64
import struct
import zlib

import numpy as np
import cv2
import pytest


def encode_png(image_rgb: np.ndarray) -> bytes:
    ok, buffer = cv2.imencode(".png", cv2.cvtColor(image_rgb, cv2.COLOR_RGB2BGR))
    assert ok
    return buffer.tobytes()


def png_data_uri(image_rgb: np.ndarray) -> str:
    payload = base64.b64encode(encode_png(image_rgb)).decode("ascii")
    return f"data:image/png;base64,{payload}"


@pytest.fixture
def red_square_image():
    """Generate a 200x200 red square on white background (RGB)."""
    img = np.ones((200, 200, 3), dtype=np.uint8) * 255
    img[40:160, 40:160] = [200, 30, 30]  # Red square
    return img


@pytest.fixture
def blue_circle_image():
    """Generate a 200x200 blue circle on white background (RGB)."""
    img = np.ones((200, 200, 3), dtype=np.uint8) * 255
    cv2.circle(img, (100, 100), 60, (30, 30, 200), -1)
    return img


@pytest.fixture
def solid_rgba_image():
    """Generate a 50x40 RGBA image of a single color, half transparent."""
    img = np.zeros((40, 50, 4), dtype=np.uint8)
    img[:, :] = [10, 200, 30, 128]
    return img


@pytest.fixture
def noise_image():
    """Generate a 200x200 random noise RGBA image."""
    rng = np.random.RandomState(42)
    return rng.randint(0, 256, (200, 200, 4), dtype=np.uint8)


@pytest.fixture
def red_square_uri(red_square_image):
    return png_data_uri(red_square_image)


@pytest.fixture
def blue_circle_uri(blue_circle_image):
    return png_data_uri(blue_circle_image)


@pytest.fixture
def asset_dir(tmp_path, red_square_image, blue_circle_image):
    """Asset root with two sample PNGs under images/samples/."""
    samples = tmp_path / "images" / "samples"
    samples.mkdir(parents=True)
    (samples / "red.png").write_bytes(encode_png(red_square_image))
    (samples / "blue.png").write_bytes(encode_png(blue_circle_image))
    return tmp_path


def png_chunk(kind: bytes, data: bytes) -> bytes:
    return (struct.pack(">I", len(data)) + kind + data
            + struct.pack(">I", zlib.crc32(kind + data) & 0xFFFFFFFF))


@pytest.fixture
def oversized_png_uri():
    """Well-formed PNG header declaring 40000x40000 pixels, above OpenCV's limit."""
    header = struct.pack(">IIBBBBB", 40000, 40000, 8, 2, 0, 0, 0)
    png = (b"\x89PNG\r\n\x1a\n"
           + png_chunk(b"IHDR", header)
           + png_chunk(b"IDAT", zlib.compress(b""))
           + png_chunk(b"IEND", b""))
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")
