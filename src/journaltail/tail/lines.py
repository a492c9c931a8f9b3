"""Line-level file access shared by the scanners and the incremental reader."""

import codecs
from pathlib import Path
from typing import Iterator

ENCODING = "utf-8"


def decode(raw: bytes, first: bool = False) -> str:
    """Decode one raw line and strip its terminator.

    ``first`` marks the line at offset 0, where a UTF-8 byte-order mark is dropped.
    """
    if first and raw.startswith(codecs.BOM_UTF8):
        raw = raw[len(codecs.BOM_UTF8) :]
    return raw.decode(ENCODING, errors="replace").rstrip("\r\n")


def iter_lines(path: Path) -> Iterator[str]:
    """Yield every line of ``path`` from the start, opened for shared read."""
    with open(path, "rb") as handle:
        for i, raw in enumerate(handle):
            yield decode(raw, first=i == 0)
