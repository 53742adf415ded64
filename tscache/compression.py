"""Pluggable value compressors used by cache shards."""

from __future__ import annotations

import gzip
import io
import threading
from abc import ABC, abstractmethod
from types import TracebackType

import zstandard


class Compressor(ABC):
    """Turns values into a compact form and back again."""

    @abstractmethod
    def compress(self, data: bytes) -> bytes:
        """Return the compressed form of ``data``."""

    @abstractmethod
    def decompress(self, data: bytes) -> bytes:
        """Return the original bytes from compressed ``data``."""


class NoCompressor(Compressor):
    """Passes data through unchanged."""

    def compress(self, data: bytes) -> bytes:
        return data

    def decompress(self, data: bytes) -> bytes:
        return data


class GzipCompressor(Compressor):
    """Gzip compression at the default level; safe to share between threads."""

    def compress(self, data: bytes) -> bytes:
        return gzip.compress(bytes(data))

    def decompress(self, data: bytes) -> bytes:
        return gzip.decompress(bytes(data))


class ZstdCompressor(Compressor):
    """Zstandard compression; a lock keeps shared use from several threads safe.

    The compressor can be used as a context manager, which closes it on exit.
    Using it after :meth:`close` raises ``ValueError``.
    """

    def __init__(self, level: int = 3) -> None:
        self._encoder: zstandard.ZstdCompressor | None = zstandard.ZstdCompressor(
            level=level
        )
        self._decoder: zstandard.ZstdDecompressor | None = zstandard.ZstdDecompressor()
        self._lock = threading.Lock()

    def compress(self, data: bytes) -> bytes:
        with self._lock:
            if self._encoder is None:
                raise ValueError("compressor is closed")
            return self._encoder.compress(bytes(data))

    def decompress(self, data: bytes) -> bytes:
        with self._lock:
            if self._decoder is None:
                raise ValueError("compressor is closed")
            with self._decoder.stream_reader(io.BytesIO(bytes(data))) as reader:
                return reader.read()

    def close(self) -> None:
        """Release the encoder and decoder."""
        with self._lock:
            self._encoder = None
            self._decoder = None

    @property
    def closed(self) -> bool:
        """Whether :meth:`close` has been called."""
        return self._encoder is None

    def __enter__(self) -> ZstdCompressor:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()