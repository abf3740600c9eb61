import datetime
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

SamplesT = npt.NDArray[np.int16]
"""Alias for re-encoded 16-bit sample arrays"""

HEADER_SIZE = 32
"""Size of the capture header in bytes"""

CRC_SPAN = 28
"""Number of leading header bytes covered by the stored CRC"""

SAMPLE_GROUP_SIZE = 4

WAV_HEADER_SIZE = 44
WAV_CHANNELS = 2
WAV_BITS_PER_SAMPLE = 16
WAV_BLOCK_ALIGN = 4


@dataclass(frozen=True)
class CaptureHeader:
    """
    Fixed 32 byte prologue of a capture file
    """

    sample_rate: int
    """Sample rate (samples/second)"""

    center_freq: int
    """Center frequency (Hz)"""

    raw_timestamp: int
    """Milliseconds since the Unix epoch"""

    sample_size: int
    """Declared size of one packed sample group, not checked against the data"""

    reserved: int
    crc: int
    """CRC-32 as stored in the header"""

    timestamp: datetime.datetime | None
    """`raw_timestamp` as UTC datetime, None when out of range"""

    crc_valid: bool

    def to_dict(self) -> dict:
        return {
            "sample_rate": self.sample_rate,
            "center_freq": self.center_freq,
            "timestamp": None if self.timestamp is None else self.timestamp.isoformat(),
            "sample_size": self.sample_size,
            "crc": self.crc,
            "crc_valid": self.crc_valid,
        }


@dataclass
class ConvertConfig:
    input_file: str

    output_prefix: str = "./raw"
    """Prefix of the output files, `-info.txt` and `-iq.wav` are appended"""

    write_json: bool = False
    """Also write the header as `<prefix>-info.json`"""

    print_report: bool = True

    @property
    def report_file(self) -> str:
        return self.output_prefix + "-info.txt"

    @property
    def wav_file(self) -> str:
        return self.output_prefix + "-iq.wav"

    @property
    def json_file(self) -> str:
        return self.output_prefix + "-info.json"
