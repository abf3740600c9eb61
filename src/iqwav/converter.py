from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from iqwav.common import HEADER_SIZE, CaptureHeader, ConvertConfig
from iqwav.exceptions import TruncatedInput
from iqwav.header import decode_header, format_report
from iqwav.logging import setup_logging
from iqwav.wav import build_container

logger = logging.getLogger("IQWav")


@dataclass
class ConversionResult:
    """
    One result from convert()
    """

    header: CaptureHeader
    report: str
    container: bytes


def convert(content: bytes) -> ConversionResult:
    """
    Decode the capture header and re-encode the samples behind it.

    Raises:
        TruncatedInput: if `content` is shorter than the capture header
    """

    header = decode_header(content)

    return ConversionResult(
        header=header,
        report=format_report(header),
        container=build_container(header.sample_rate, content[HEADER_SIZE:]),
    )


def run(config: ConvertConfig) -> ConversionResult:
    with open(config.input_file, "rb") as f:
        content = f.read()

    logger.debug(f"Read {len(content)} bytes from {config.input_file}")

    # everything is computed before the first write, a bad input leaves no outputs behind
    result = convert(content)

    if config.print_report:
        print(result.report)

    Path(config.report_file).write_text(result.report)
    if config.write_json:
        Path(config.json_file).write_text(json.dumps(result.header.to_dict(), indent=2))
    Path(config.wav_file).write_bytes(result.container)

    logger.debug(f"Wrote {config.report_file} and {config.wav_file}")
    return result


def output_prefix_default() -> str:
    return os.environ.get("IQWAV_OUTPUT") or ConvertConfig.output_prefix


def main(argv=None) -> int:
    p = argparse.ArgumentParser(description="Convert an IQ capture file to a 16-bit PCM WAV file")
    p.add_argument(
        "-i",
        "--input",
        dest="infile",
        required=True,
        help="Capture file to convert",
    )
    p.add_argument(
        "-o",
        "--output",
        dest="output",
        default=None,
        help="Output prefix, `-info.txt` and `-iq.wav` are appended (default: ./raw). Environment variable IQWAV_OUTPUT is used when not given.",
    )
    p.add_argument(
        "--json",
        dest="json",
        action="store_true",
        help="Also write the decoded header to `<output>-info.json`",
    )
    p.add_argument(
        "-q",
        "--quiet",
        dest="quiet",
        action="store_true",
        help="Do not print the header report to stdout",
    )
    p.add_argument(
        "-log", "--loglevel", default="info", help="Provide logging level. Example --loglevel debug, default=info"
    )
    p.add_argument("--logfile", dest="logfile", default=None, help="Also write log messages to this file")

    args = p.parse_args(argv)

    setup_logging(level=args.loglevel.upper(), logfile=args.logfile)

    config = ConvertConfig(
        input_file=args.infile,
        output_prefix=args.output if args.output is not None else output_prefix_default(),
        write_json=args.json,
        print_report=not args.quiet,
    )

    try:
        run(config)
    except TruncatedInput as e:
        logger.error(f"Cannot convert {config.input_file}: {e}")
        return 1
    except OSError:
        logger.exception("I/O error, aborting...")
        return 1

    logger.info("done")
    return 0


if __name__ == "__main__":
    sys.exit(main())
