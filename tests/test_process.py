import logging
import tempfile

import pytest

from tfc import process as process_module
from tfc.errors import ConfigError, InputOpenError, OutputError, ReplaceError
from tfc.models import Config, LeadingStyle, LineEnding
from tfc.process import process, process_summary, process_transform, validate_config


@pytest.fixture
def sample(tmp_path):
    path = tmp_path / "in.txt"
    path.write_bytes(b"  foo\r\n\tbar\n")
    return path


def test_validate_requires_input():
    with pytest.raises(ConfigError, match="must be specified"):
        validate_config(Config())


def test_validate_requires_existing_input(tmp_path):
    with pytest.raises(ConfigError, match="does not exist"):
        validate_config(Config(input_path=tmp_path / "missing.txt"))


def test_validate_rejects_replace_with_summary(sample):
    with pytest.raises(ConfigError, match="with a summary"):
        validate_config(Config(input_path=sample, replace=True))


def test_validate_rejects_output_equal_to_input(sample):
    config = Config(input_path=sample, output_path=sample, trailing=LineEnding.unix)
    with pytest.raises(ConfigError, match="same"):
        validate_config(config)


def test_validate_warns_on_overwrite(sample, tmp_path, caplog):
    out = tmp_path / "out.txt"
    out.write_bytes(b"old")
    with caplog.at_level(logging.WARNING, logger="tfc.process"):
        validate_config(Config(input_path=sample, output_path=out, trailing=LineEnding.unix))
    assert "will be overwritten" in caplog.text


def test_transform_to_output_file(sample, tmp_path):
    out = tmp_path / "out.txt"
    config = Config(input_path=sample, output_path=out, leading=LeadingStyle.tab, trailing=LineEnding.unix)
    assert process(config) == 0
    assert out.read_bytes() == b"\tfoo\n\tbar\n"
    assert sample.read_bytes() == b"  foo\r\n\tbar\n"


def test_transform_to_stdout(sample, capsysbinary):
    config = Config(input_path=sample, leading=LeadingStyle.space, trailing=LineEnding.dos)
    assert process_transform(config) == 0
    assert capsysbinary.readouterr().out == b"  foo\r\n    bar\r\n"


def test_unopenable_output_falls_back_to_stdout(sample, tmp_path, capsysbinary, caplog):
    out = tmp_path / "no-such-dir" / "out.txt"
    config = Config(input_path=sample, output_path=out, trailing=LineEnding.unix)
    with caplog.at_level(logging.WARNING, logger="tfc.process"):
        assert process(config) == 0
    assert capsysbinary.readouterr().out == b"  foo\n\tbar\n"
    assert "writing to standard output" in caplog.text
    assert not out.exists()


def test_unopenable_input_is_fatal(tmp_path):
    config = Config(input_path=tmp_path, trailing=LineEnding.unix)
    with pytest.raises(InputOpenError):
        process(config)


def test_replace_in_place(sample, tmp_path, monkeypatch):
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
    config = Config(input_path=sample, replace=True, leading=LeadingStyle.tab, trailing=LineEnding.unix)
    assert process(config) == 0
    assert sample.read_bytes() == b"\tfoo\n\tbar\n"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["in.txt"]


def test_replace_copy_failure_leaves_no_temp_file(sample, tmp_path, monkeypatch):
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))

    def broken_copy(src, dst):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(process_module.shutil, "copyfile", broken_copy)
    config = Config(input_path=sample, replace=True, trailing=LineEnding.unix)
    with pytest.raises(ReplaceError, match="Unable to copy"):
        process(config)
    assert sample.read_bytes() == b"  foo\r\n\tbar\n"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["in.txt"]


def test_replace_with_missing_input_removes_temp_file(tmp_path, monkeypatch):
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
    config = Config(input_path=tmp_path / "gone.txt", replace=True, trailing=LineEnding.unix)
    with pytest.raises(InputOpenError):
        process(config)
    assert list(tmp_path.iterdir()) == []


def test_summary_to_stdout(sample, capsys):
    assert process_summary(Config(input_path=sample)) == 0
    out = capsys.readouterr().out
    assert out == (
        f"{sample}\n"
        "  Total Lines:\t2\n"
        "Line beginning:\n"
        "  Space only:\t1\n"
        "  Tab only:\t1\n"
        "Line ending:\n"
        "  Dos:\t\t1\n"
        "  Unix:\t\t1\n"
    )


def test_summary_debug_to_file(sample, tmp_path):
    out = tmp_path / "report.txt"
    assert process(Config(input_path=sample, output_path=out, debug=True)) == 0
    assert out.read_text() == f"{sample}\n2 1 1 0 0 1 1 0\n"


def test_validate_rejects_directory_input(tmp_path):
    with pytest.raises(ConfigError, match="is a directory"):
        validate_config(Config(input_path=tmp_path, trailing=LineEnding.unix))


def test_replace_without_temp_dir_leaves_original(sample, tmp_path, monkeypatch):
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path / "nope"))
    config = Config(input_path=sample, replace=True, trailing=LineEnding.unix)
    with pytest.raises(ReplaceError, match="temporary file"):
        process(config)
    assert sample.read_bytes() == b"  foo\r\n\tbar\n"


def test_write_failure_is_reported(sample, tmp_path, monkeypatch):
    def broken_transform(config, source, sink):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(process_module, "transform_stream", broken_transform)
    config = Config(input_path=sample, output_path=tmp_path / "out.txt", trailing=LineEnding.unix)
    with pytest.raises(OutputError, match="No space left"):
        process(config)
