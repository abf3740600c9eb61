import datetime
import logging
import struct
import zlib

from iqwav.common import CRC_SPAN, HEADER_SIZE, CaptureHeader
from iqwav.exceptions import TruncatedInput

logger = logging.getLogger("IQWav")

# sample_rate, center_freq, timestamp_ms, sample_size, reserved, crc
HEADER_STRUCT = struct.Struct("<IQQIII")

_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)


def compute_crc(data: bytes) -> int:
    """CRC-32/IEEE (ISO-HDLC) of `data`"""
    return zlib.crc32(data) & 0xFFFFFFFF


def ms_to_datetime(ms: int) -> datetime.datetime | None:
    try:
        return _EPOCH + datetime.timedelta(milliseconds=ms)
    except OverflowError:
        logger.warning(f"Timestamp {ms} ms is out of range")
        return None


def decode_header(buf: bytes) -> CaptureHeader:
    """
    Decode the capture header from the first 32 bytes of `buf`.

    A CRC mismatch is logged and reported through `crc_valid`, it never stops decoding.

    Raises:
        TruncatedInput: if `buf` is shorter than the header
    """

    if len(buf) < HEADER_SIZE:
        raise TruncatedInput(len(buf), HEADER_SIZE)

    raw = bytes(buf[:HEADER_SIZE])
    sample_rate, center_freq, raw_timestamp, sample_size, reserved, crc = HEADER_STRUCT.unpack(raw)

    crc_valid = compute_crc(raw[:CRC_SPAN]) == crc
    if not crc_valid:
        logger.info("CRC mismatch")

    return CaptureHeader(
        sample_rate=sample_rate,
        center_freq=center_freq,
        raw_timestamp=raw_timestamp,
        sample_size=sample_size,
        reserved=reserved,
        crc=crc,
        timestamp=ms_to_datetime(raw_timestamp),
        crc_valid=crc_valid,
    )


def encode_header(header: CaptureHeader, crc: int | None = None) -> bytes:
    """
    Pack `header` back into its 32 byte form.

    The stored CRC is written verbatim unless `crc` is given.
    """

    return HEADER_STRUCT.pack(
        header.sample_rate,
        header.center_freq,
        header.raw_timestamp,
        header.sample_size,
        header.reserved,
        header.crc if crc is None else crc,
    )


def build_capture(
    sample_rate: int,
    center_freq: int = 0,
    raw_timestamp: int = 0,
    sample_size: int = 0,
    reserved: int = 0,
    samples: bytes = b"",
) -> bytes:
    """Capture file contents with a correctly checksummed header followed by `samples`"""
    prefix = HEADER_STRUCT.pack(sample_rate, center_freq, raw_timestamp, sample_size, reserved, 0)[:CRC_SPAN]
    return prefix + struct.pack("<I", compute_crc(prefix)) + bytes(samples)


def format_report(header: CaptureHeader) -> str:
    if header.timestamp is None:
        ts = f"invalid ({header.raw_timestamp} ms)"
    else:
        ts = f"{header.timestamp:%Y-%m-%d %H:%M:%S.%f %z %Z}"

    return "\n".join(
        [
            f"SampleRate: {header.sample_rate}",
            f"CenterFreq: {header.center_freq}",
            f"Timestamp: {ts}",
            f"SampleSize: {header.sample_size}",
            f"CRC: {str(header.crc_valid).lower()}",
        ]
    )
