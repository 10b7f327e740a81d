"""Tests for the bond_attrs blob codec."""
import pytest

from bond_server.errors import StoreError
from bond_server.schemas import BondAttrs, decode_attrs, encode_attrs


@pytest.mark.parametrize("rating", [1, 5, 10])
def test_attrs_survive_encoding(rating):
    attrs = BondAttrs(picture="cover.png", description="Zero coupon", rating=rating)
    blob = encode_attrs(attrs)
    assert isinstance(blob, bytes)
    assert decode_attrs(blob) == attrs


def test_decode_accepts_memoryview():
    attrs = BondAttrs(description="mv", rating=3)
    assert decode_attrs(memoryview(encode_attrs(attrs))) == attrs


def test_corrupted_blob_is_store_error():
    with pytest.raises(StoreError):
        decode_attrs(b"{not json")


def test_wrong_shape_blob_is_store_error():
    with pytest.raises(StoreError):
        decode_attrs(b'{"rating": "high"}')


def test_non_bytes_is_store_error():
    with pytest.raises(StoreError) as exc_info:
        decode_attrs(42)
    assert "expected bytes" in str(exc_info.value)
