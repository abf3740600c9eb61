import logging
import struct

import numpy as np

from iqwav.common import (SAMPLE_GROUP_SIZE, WAV_BITS_PER_SAMPLE,
                          WAV_BLOCK_ALIGN, WAV_CHANNELS, WAV_HEADER_SIZE,
                          SamplesT)

logger = logging.getLogger("IQWav")

# RIFF, size, WAVE, fmt , 16, format, channels, rate, byte rate, block align, bits, data, size
WAV_HEADER_STRUCT = struct.Struct("<4sI4s4sIHHIIHH4sI")

PCM_FORMAT = 1


def byte_rate(sample_rate: int) -> int:
    """
    Bytes per second declared in the container, always 16-bit stereo.

    Computed in unsigned 32-bit arithmetic, so very large sample rates wrap.
    """
    return ((sample_rate * WAV_BITS_PER_SAMPLE * WAV_CHANNELS) & 0xFFFFFFFF) // 8


def wav_header(sample_rate: int, data_size: int = 0) -> bytearray:
    return bytearray(
        WAV_HEADER_STRUCT.pack(
            b"RIFF",
            (WAV_HEADER_SIZE - 8 + data_size) & 0xFFFFFFFF,
            b"WAVE",
            b"fmt ",
            16,
            PCM_FORMAT,
            WAV_CHANNELS,
            sample_rate,
            byte_rate(sample_rate),
            WAV_BLOCK_ALIGN,
            WAV_BITS_PER_SAMPLE,
            b"data",
            data_size & 0xFFFFFFFF,
        )
    )


def reencode_samples(stream: bytes) -> SamplesT:
    """
    Reduce 32-bit little-endian sample groups to 16-bit PCM.

    Each group is shifted left by 8 and then arithmetically right by 16, which
    keeps bits 8..23 sign-extended from bit 23. A trailing partial group is dropped.
    """

    leftover = len(stream) % SAMPLE_GROUP_SIZE
    if leftover:
        logger.debug(f"Dropping {leftover} trailing byte(s) of incomplete sample group")

    arr = np.frombuffer(stream, dtype="<i4", count=len(stream) // SAMPLE_GROUP_SIZE)
    arr = (arr << 8) >> 16
    return arr.astype("<i2")


def patch_sizes(container: bytearray) -> None:
    """Write RIFF size and data size once the payload is in place"""
    struct.pack_into("<I", container, 4, (len(container) - 8) & 0xFFFFFFFF)
    struct.pack_into("<I", container, 40, (len(container) - WAV_HEADER_SIZE) & 0xFFFFFFFF)


def build_container(sample_rate: int, stream: bytes) -> bytes:
    """
    sample_rate  -> from CaptureHeader, written verbatim (0 is accepted)
    stream       -> capture bytes after the header
    """

    body = wav_header(sample_rate)
    body += reencode_samples(stream).tobytes()

    payload_len = len(body) - WAV_HEADER_SIZE
    logger.info(f"body samples length: {(payload_len // 2) % 8}")

    patch_sizes(body)
    return bytes(body)
