"""Write JSON files in the boot file system."""

import json
import os
import tempfile
from logging import Logger
from pathlib import Path
from typing import Any


def serialize(payload: Any) -> bytes:
    """Return the bytes written to disk for the given payload."""
    return (json.dumps(payload, indent=2) + "\n").encode("utf-8")


def write_json_file(
    directory: str | Path, name: str, payload: Any, *, logger: Logger
) -> bytes:
    """Write the payload as JSON in the given directory.

    The file is first written in a temporary file and then renamed, so that a
    compute node never downloads a partially written file.

    Args:
        directory (str | Path): target directory. Created if missing.
        name (str): file name.
        payload (Any): JSON serializable object.
        logger (Logger): Logger instance.

    Returns:
        bytes: raw content written to the file.

    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    data = serialize(payload)
    fname = directory / name

    logger.info("Writing file: %s", fname)
    logger.debug(payload)
    fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=f".{name}.")
    try:
        with os.fdopen(fd, "wb") as f:
            # Served over TFTP: must be world readable
            os.fchmod(f.fileno(), 0o644)
            f.write(data)
        os.replace(tmp_name, fname)
    except OSError:
        logger.error("Error writing file: %s", fname)
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
    return data
