import pytest
import zstandard

from tscache.compression import (
    Compressor,
    GzipCompressor,
    NoCompressor,
    ZstdCompressor,
)


def test_gzip_compress_and_decompress():
    compressor = GzipCompressor()
    data = b"hello world, this is a gzip test!"
    compressed = compressor.compress(data)
    assert len(compressed) > 0
    assert compressor.decompress(compressed) == data


def test_gzip_round_trip():
    compressor = GzipCompressor()
    data = b"test gzip data"
    assert compressor.decompress(compressor.compress(data)) == data


def test_gzip_output_has_gzip_magic():
    assert GzipCompressor().compress(b"abc")[:2] == b"\x1f\x8b"


def test_gzip_shrinks_repetitive_data():
    data = b"compress me!" * 200
    assert len(GzipCompressor().compress(data)) < len(data)


def test_gzip_rejects_garbage():
    with pytest.raises(OSError):
        GzipCompressor().decompress(b"definitely not gzip")


def test_zstd_round_trip():
    with ZstdCompressor() as compressor:
        data = (
            b"This is a test string for Zstd compression that should be large "
            b"enough to see compression benefits."
        )
        assert compressor.decompress(compressor.compress(data)) == data


def test_zstd_output_has_zstd_magic():
    with ZstdCompressor() as compressor:
        assert compressor.compress(b"abc")[:4] == b"\x28\xb5\x2f\xfd"


def test_zstd_empty_round_trip():
    with ZstdCompressor() as compressor:
        assert compressor.decompress(compressor.compress(b"")) == b""


def test_zstd_rejects_garbage():
    with ZstdCompressor() as compressor:
        with pytest.raises((zstandard.ZstdError, ValueError, OSError)) as excinfo:
            compressor.decompress(b"definitely not zstd data")
        assert str(excinfo.value)
        assert compressor.decompress(compressor.compress(b"still works")) == b"still works"


def test_zstd_use_after_close_raises():
    compressor = ZstdCompressor()
    compressor.close()
    assert compressor.closed
    with pytest.raises(ValueError):
        compressor.compress(b"data")
    with pytest.raises(ValueError):
        compressor.decompress(b"data")


def test_no_compressor_round_trip():
    compressor = NoCompressor()
    data = b"This is test data without compression"
    compressed = compressor.compress(data)
    assert compressed == data
    assert compressor.decompress(compressed) == data


@pytest.mark.parametrize(
    "factory", [GzipCompressor, NoCompressor, ZstdCompressor], ids=["Gzip", "None", "Zstd"]
)
def test_every_compressor_round_trips(factory):
    compressor = factory()
    test_data = b"test data"
    assert compressor.decompress(compressor.compress(test_data)) == test_data
    if isinstance(compressor, ZstdCompressor):
        compressor.close()


def test_compressor_is_abstract():
    with pytest.raises(TypeError):
        Compressor()