"""
conftest.py - pytest will automatically detect this file
and use fixtures defined here in all tests
"""

import struct

import pytest

from iqwav.header import build_capture


@pytest.fixture(scope="function")
def capture_8k():
    """sample_rate=8000, other fields zero, two sample groups"""
    return build_capture(8000, samples=struct.pack("<II", 0x00010000, 0xFFFE0000))


@pytest.fixture(scope="function")
def capture_file(tmp_path, capture_8k):
    fn = tmp_path / "capture.iq"
    fn.write_bytes(capture_8k)
    return fn
