"""Discovery of schema files and collection of their message ids."""

import glob
import os
from pathlib import Path

from .scanner import scan
from .types import GeneratorError, ProtoMessageInfo

DEFAULT_EXTENSION = "proto"

_GLOB_CHARS = frozenset("*?[]")


class CollectError(GeneratorError):
    """Raised when the schema directory or file pattern cannot be resolved."""


def glob_pattern(directory: str | Path, extension: str = DEFAULT_EXTENSION) -> str:
    """Build the non-recursive pattern matching schema files in `directory`."""
    if not extension:
        raise CollectError("File extension must not be empty")
    if _GLOB_CHARS.intersection(extension) or "/" in extension or os.sep in extension:
        raise CollectError(f"Invalid file extension {extension!r}")

    return os.path.join(glob.escape(os.fspath(directory)), f"*.{extension}")


def find_proto_files(directory: str | Path, extension: str = DEFAULT_EXTENSION) -> list[Path]:
    """List schema files directly inside `directory`.

    The order is whatever the directory enumeration yields and is not sorted;
    it becomes the order of generated modules and registrations.
    """
    pattern = glob_pattern(directory, extension)
    if not os.path.isdir(directory):
        raise CollectError(f"{directory} is not a directory")

    paths = []
    for name in glob.iglob(pattern):
        try:
            name.encode("utf-8")
        except UnicodeEncodeError as e:
            raise CollectError(f"File name is not valid UTF-8: {name!r}") from e
        if os.path.isfile(name):
            paths.append(Path(name))
    return paths


def collect(directory: str | Path, extension: str = DEFAULT_EXTENSION) -> list[ProtoMessageInfo]:
    """Scan every schema file in `directory`, in discovery order."""
    return [scan(path) for path in find_proto_files(directory, extension)]


def proto_list(protos: list[ProtoMessageInfo]) -> list[str]:
    """Return the file paths of the collected records."""
    return [info.file_path for info in protos]
