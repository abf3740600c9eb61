import json
import struct

import pytest

from iqwav.converter import convert, main
from iqwav.exceptions import TruncatedInput
from iqwav.header import build_capture


def test_convert(capture_8k):
    r = convert(capture_8k)

    assert r.header.crc_valid
    assert r.header.sample_rate == 8000
    assert r.report.startswith("SampleRate: 8000\n")
    assert len(r.container) == 48
    assert struct.unpack_from("<I", r.container, 28)[0] == 32000
    assert r.container[44:] == b"\x00\x01\x00\xfe"


def test_convert_truncated():
    with pytest.raises(TruncatedInput):
        convert(bytes(31))


def test_convert_header_only():
    r = convert(build_capture(48000))

    assert len(r.container) == 44
    assert struct.unpack_from("<I", r.container, 4)[0] == 36


def test_main_writes_outputs(tmp_path, capture_file, capsys):
    prefix = tmp_path / "out"

    assert main(["-i", str(capture_file), "-o", str(prefix)]) == 0

    report = (tmp_path / "out-info.txt").read_text()
    assert report.split("\n")[-1] == "CRC: true"
    assert report in capsys.readouterr().out

    wav = (tmp_path / "out-iq.wav").read_bytes()
    assert len(wav) == 48
    assert not (tmp_path / "out-info.json").exists()


def test_main_json(tmp_path, capture_file):
    prefix = tmp_path / "out"

    assert main(["-i", str(capture_file), "-o", str(prefix), "--json", "-q"]) == 0

    d = json.loads((tmp_path / "out-info.json").read_text())
    assert d["sample_rate"] == 8000
    assert d["crc_valid"] is True


def test_main_env_output(tmp_path, capture_file, monkeypatch):
    monkeypatch.setenv("IQWAV_OUTPUT", str(tmp_path / "env"))

    assert main(["-i", str(capture_file), "-q"]) == 0
    assert (tmp_path / "env-iq.wav").exists()

    # explicit flag wins over the environment
    assert main(["-i", str(capture_file), "-o", str(tmp_path / "flag"), "-q"]) == 0
    assert (tmp_path / "flag-iq.wav").exists()


def test_main_truncated_writes_nothing(tmp_path):
    fn = tmp_path / "short.iq"
    fn.write_bytes(bytes(31))

    assert main(["-i", str(fn), "-o", str(tmp_path / "out"), "-q"]) == 1
    assert not (tmp_path / "out-info.txt").exists()
    assert not (tmp_path / "out-iq.wav").exists()


def test_main_missing_input(tmp_path):
    assert main(["-i", str(tmp_path / "nope.iq"), "-o", str(tmp_path / "out"), "-q"]) == 1


def test_main_unwritable_output(tmp_path, capture_file):
    assert main(["-i", str(capture_file), "-o", str(tmp_path / "missing" / "out"), "-q"]) == 1


def test_main_requires_input():
    with pytest.raises(SystemExit):
        main([])


def test_main_logfile(tmp_path, capture_file):
    log = tmp_path / "iqwav.log"

    assert main(["-i", str(capture_file), "-o", str(tmp_path / "out"), "-q", "--logfile", str(log)]) == 0
    assert "done" in log.read_text()
