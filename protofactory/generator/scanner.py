"""Line-oriented scanner for message id annotations."""

import re
from collections.abc import Iterable
from pathlib import Path

from .types import GeneratorError, MessageMetadata, ProtoMessageInfo

ID_ANNOTATION = re.compile(r"//\s*@id:\s*(0[xX][0-9a-fA-F]{4})\s*$")
MESSAGE_DECLARATION = re.compile(r"\bmessage\s+(\S+?)\s*\{*\s*$")


class ScanError(GeneratorError):
    """Raised when a schema file cannot be read."""


def scan_lines(lines: Iterable[str]) -> list[MessageMetadata]:
    """Pair each `// @id:` annotation with the next message declaration.

    While no id is pending, lines are only tested for an annotation. Once an
    id is pending, lines are only tested for a declaration, so a second
    annotation cannot replace it. An id still pending at the end is dropped.
    """
    messages: list[MessageMetadata] = []
    pending: str | None = None

    for lineno, line in enumerate(lines, start=1):
        line = line.rstrip("\r\n")

        if pending is None:
            match = ID_ANNOTATION.search(line)
            if match:
                pending = match.group(1)
            continue

        # A line holds at most one declaration: the first match wins.
        match = MESSAGE_DECLARATION.search(line)
        if match:
            messages.append(MessageMetadata(name=match.group(1), id=pending, line=lineno))
            pending = None

    return messages


def parse(text: str) -> list[MessageMetadata]:
    """Scan schema text held in memory."""
    return scan_lines(text.split("\n"))


def scan(path: str | Path) -> ProtoMessageInfo:
    """Scan a schema file into its module record."""
    path = Path(path)

    try:
        data = path.read_bytes()
    except OSError as e:
        raise ScanError(f"Failed to open {path}: {e.strerror or e}") from e

    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        line = data.count(b"\n", 0, e.start) + 1
        raise ScanError(f"{path}:{line}: file is not valid UTF-8") from e

    return ProtoMessageInfo(file_path=str(path), file_name=path.stem, messages=parse(text))
