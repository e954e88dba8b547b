"""
Drivers: open the files named by a Config and run one pass over them.

The summary and transform paths are separate passes; which one runs is
decided once by `Config.is_summary`.
"""

from __future__ import annotations

import contextlib
import logging
import os
import shutil
import sys
import tempfile
from pathlib import Path
from typing import BinaryIO, ContextManager, Optional

from .errors import ConfigError, InputOpenError, OutputError, ReplaceError
from .models import Config
from .normalize import transform_stream
from .summary import render_debug, render_summary, summarize_stream

logger = logging.getLogger(__name__)


def validate_config(config: Config) -> None:
    """
    Reject configurations that must not start a pass.

    Nothing is opened for writing before this returns.
    """
    input_path = config.input_path
    if input_path is None:
        raise ConfigError("Input (or replacement) file must be specified.")

    if not input_path.exists():
        raise ConfigError(f"Input file {input_path} does not exist.")

    if input_path.is_dir():
        raise ConfigError(f"Input {input_path} is a directory, not a file.")

    if config.replace and config.is_summary:
        raise ConfigError(f"Cannot overwrite input file {input_path} with a summary.")

    output_path = config.output_path
    if output_path is None or not output_path.exists():
        return

    if config.replace:
        logger.warning("Replacing %s in place; output file %s is ignored.", input_path, output_path)
        return

    if os.path.samefile(input_path, output_path):
        raise ConfigError(
            f"Input and output files are the same. To replace the source file use: tfc -r {input_path} [options]"
        )

    logger.warning("Output file %s will be overwritten.", output_path)


def _open_input(path: Path) -> BinaryIO:
    try:
        return open(path, "rb")
    except OSError as exc:
        raise InputOpenError(f"Unable to open file {path}: {exc.strerror or exc}") from exc


def _stdout(mode: str) -> ContextManager:
    # stdout is borrowed, never closed
    return contextlib.nullcontext(sys.stdout.buffer if "b" in mode else sys.stdout)


def _open_output(path: Optional[Path], mode: str = "wb") -> ContextManager:
    if path is None:
        return _stdout(mode)
    try:
        return open(path, mode)
    except OSError as exc:
        logger.warning("Unable to open output %s (%s); writing to standard output.", path, exc.strerror or exc)
        return _stdout(mode)


def process(config: Config) -> int:
    logger.debug("Configuration:\n%s", config.describe())
    if config.is_summary:
        return process_summary(config)
    return process_transform(config)


def process_summary(config: Config) -> int:
    with _open_input(config.input_path) as source:
        counts = summarize_stream(source)

    name = str(config.input_path)
    report = render_debug(name, counts) if config.debug else render_summary(name, counts)

    with _open_output(config.output_path, "w") as sink:
        sink.write(report)
        sink.flush()

    logger.info("Summarized %s: %d lines", name, counts.lines)
    return 0


def process_transform(config: Config) -> int:
    if config.replace:
        return _replace_in_place(config)

    with _open_input(config.input_path) as source:
        with _open_output(config.output_path) as sink:
            try:
                consumed = transform_stream(config, source, sink)
                sink.flush()
            except OSError as exc:
                raise OutputError(f"Unable to write output: {exc.strerror or exc}") from exc

    logger.info("Transformed %s (%d bytes read)", config.input_path, consumed)
    return 0


def _replace_in_place(config: Config) -> int:
    """
    Transform into a temp file, then copy it over the input.

    The input file is only ever touched by the final copy.
    """
    input_path = config.input_path
    try:
        fd, tmp_name = tempfile.mkstemp(prefix="tfc-", suffix=".tmp")
    except OSError as exc:
        raise ReplaceError(f"Unable to create temporary file: {exc.strerror or exc}") from exc
    tmp_path = Path(tmp_name)
    try:
        try:
            with os.fdopen(fd, "wb") as sink:
                with _open_input(input_path) as source:
                    consumed = transform_stream(config, source, sink)
        except OSError as exc:
            raise ReplaceError(f"Unable to write temporary file {tmp_path}: {exc.strerror or exc}") from exc

        try:
            shutil.copyfile(tmp_path, input_path)
        except OSError as exc:
            raise ReplaceError(f"Unable to copy {tmp_path} over {input_path}: {exc.strerror or exc}") from exc
    finally:
        try:
            tmp_path.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.error("Unable to remove temporary file %s: %s", tmp_path, exc.strerror or exc)

    logger.info("Replaced %s in place (%d bytes read)", input_path, consumed)
    return 0
