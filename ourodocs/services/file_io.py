"""
Reading Ouroboros sources and documentation pages from disk.

Text comes back decoded with newlines normalized to ``\\n``; binary and
oversized files are refused with a message instead of an exception.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import chardet


# Byte order marks and the codec that strips them
BOM_CODECS = {
    b'\xef\xbb\xbf': 'utf-8-sig',
    b'\xff\xfe': 'utf-16',
    b'\xfe\xff': 'utf-16',
}

# Leading bytes of formats that are never documentation
BINARY_MAGIC = (b'\x89PNG', b'\xff\xd8\xff', b'GIF8', b'PK\x03\x04', b'\x1f\x8b', b'%PDF', b'\x7fELF')


@dataclass
class ReadResult:
    """Decoded text, or why there is none."""
    success: bool
    text: Optional[str] = None
    error: Optional[str] = None
    is_binary: bool = False


class SourceReader:
    """Reads text files for the highlighter and the viewer."""

    def __init__(self, max_size: int = 10 * 1024 * 1024, min_confidence: float = 0.7):
        self.max_size = max_size
        self.min_confidence = min_confidence

    def read(self, path: Union[Path, str]) -> ReadResult:
        """Read and decode a file."""
        path = Path(path)

        if not path.is_file():
            reason = "Not a file" if path.exists() else "File not found"
            return ReadResult(success=False, error=f"{reason}: {path}")

        try:
            data = path.read_bytes()
        except OSError as e:
            return ReadResult(success=False, error=f"Cannot read {path}: {e.strerror or e}")

        if len(data) > self.max_size:
            return ReadResult(
                success=False,
                error=f"File too large: {len(data)} bytes, limit is {self.max_size}"
            )

        codec = self._bom_codec(data)
        if codec is None and looks_binary(data):
            return ReadResult(success=False, error=f"Binary file: {path}", is_binary=True)

        text = self._decode(data, codec or self._guess_codec(data), path)
        return ReadResult(success=True, text=text.replace('\r\n', '\n').replace('\r', '\n'))

    @staticmethod
    def _bom_codec(data: bytes) -> Optional[str]:
        for bom, codec in BOM_CODECS.items():
            if data.startswith(bom):
                return codec
        return None

    def _guess_codec(self, data: bytes) -> str:
        """UTF-8 when it decodes, otherwise whatever chardet is sure of."""
        try:
            data.decode('utf-8')
            return 'utf-8'
        except UnicodeDecodeError:
            pass

        guess = chardet.detect(data)
        if guess['encoding'] and guess['confidence'] >= self.min_confidence:
            return guess['encoding']
        return 'latin-1'

    @staticmethod
    def _decode(data: bytes, codec: str, path: Path) -> str:
        try:
            return data.decode(codec)
        except (UnicodeDecodeError, LookupError):
            logging.debug(f"SourceReader - {path} does not decode as {codec}, reading as latin-1")
            return data.decode('latin-1')


def looks_binary(data: bytes) -> bool:
    """Whether the start of a file is binary rather than text."""
    head = data[:8192]
    return head.startswith(BINARY_MAGIC) or b'\x00' in head
