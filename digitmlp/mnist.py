"""Readers for the IDX files that hold MNIST images and labels."""

from __future__ import annotations

import os
import struct
from pathlib import Path

import numpy as np

IMAGE_MAGIC = 0x00000803
LABEL_MAGIC = 0x00000801

_IMAGE_HEADER = struct.Struct(">4I")
_LABEL_HEADER = struct.Struct(">2I")


class IdxFormatError(ValueError):
    """Raised when a file is not a well-formed IDX image or label file."""


def _unpack_header(data: bytes, header: struct.Struct, path: Path) -> tuple[int, ...]:
    if len(data) < header.size:
        raise IdxFormatError(
            f"{path}: file holds {len(data)} bytes, header needs {header.size}"
        )
    return header.unpack_from(data)


def _body(data: bytes, offset: int, size: int, path: Path) -> bytes:
    body = data[offset:offset + size]
    if len(body) < size:
        raise IdxFormatError(
            f"{path}: expected {size} bytes of data, found {len(body)}"
        )
    return body


def read_images(path: str | os.PathLike[str]) -> np.ndarray:
    """Read an IDX3 image file.

    Returns a float32 array of shape (count, rows * cols) with every pixel
    scaled from 0..255 into 0..1.
    """
    path = Path(path)
    data = path.read_bytes()
    magic, count, rows, cols = _unpack_header(data, _IMAGE_HEADER, path)
    if magic != IMAGE_MAGIC:
        raise IdxFormatError(
            f"{path}: magic number {magic:#010x} is not an image file's"
        )
    pixels_per_image = rows * cols
    body = _body(data, _IMAGE_HEADER.size, count * pixels_per_image, path)
    raw = np.frombuffer(body, dtype=np.uint8).reshape(count, pixels_per_image)
    return raw.astype(np.float32) / np.float32(255.0)


def read_labels(path: str | os.PathLike[str]) -> np.ndarray:
    """Read an IDX1 label file into an integer array of shape (count,)."""
    path = Path(path)
    data = path.read_bytes()
    magic, count = _unpack_header(data, _LABEL_HEADER, path)
    if magic != LABEL_MAGIC:
        raise IdxFormatError(
            f"{path}: magic number {magic:#010x} is not a label file's"
        )
    body = _body(data, _LABEL_HEADER.size, count, path)
    return np.frombuffer(body, dtype=np.uint8).astype(np.int64)