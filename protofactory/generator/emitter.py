"""Writes generated factory sources for collected schema files."""

import re
from collections.abc import Callable
from pathlib import Path
from typing import Any

from . import python, rust
from .types import EmitError, ProtoMessageInfo

LANGUAGES = {
    "rust": rust,
    "python": python,
}

ID_LITERAL = re.compile(r"0[xX][0-9a-fA-F]{4}")

# Names the aggregator exports besides the schema modules and messages.
RESERVED_NAMES = ("factory", "get_id", "get_descriptor")


def _claim(exported: dict[str, str], name: str, where: str, owner: str) -> None:
    if name in exported:
        raise EmitError(f"{where}: {owner} clashes with {exported[name]}")
    exported[name] = f"{owner} from {where}"


def validate(
    protos: list[ProtoMessageInfo],
    is_identifier: Callable[[str], bool],
    module_suffix: str = "",
) -> None:
    """Check that every module, message and id can be emitted as-is.

    The aggregator exports every module and message under one namespace, so
    each exported name must be unique and must not shadow `RESERVED_NAMES`.
    """
    exported = {name: f"generated {name}" for name in RESERVED_NAMES}

    for proto in protos:
        if not is_identifier(proto.file_name):
            raise EmitError(f"{proto.file_path}: {proto.file_name!r} is not a valid module name")
        module = f"{proto.file_name}{module_suffix}"
        _claim(exported, module, proto.file_path, f"module {module}")

    for proto in protos:
        for message in proto.messages:
            where = f"{proto.file_path}:{message.line}"
            if not message.id or not ID_LITERAL.fullmatch(message.id):
                raise EmitError(f"{where}: message {message.name} has no valid @id annotation")
            if not is_identifier(message.name):
                raise EmitError(f"{where}: {message.name!r} is not a valid message name")
            _claim(exported, message.name, where, f"message {message.name}")


def render(
    output_dir: str | Path,
    protos: list[ProtoMessageInfo],
    *,
    language: str = "rust",
    **options: Any,
) -> dict[Path, str]:
    """Render all output files in memory, keyed by destination path."""
    try:
        generator = LANGUAGES[language]
    except KeyError:
        raise EmitError(f"Unknown language: {language}") from None

    validate(protos, generator.is_identifier, options.get("module_suffix", generator.MODULE_SUFFIX))
    return generator.render_files(output_dir, protos, **options)


def emit(
    output_dir: str | Path,
    protos: list[ProtoMessageInfo],
    *,
    language: str = "rust",
    **options: Any,
) -> list[Path]:
    """Generate the factory and module aggregator for `protos`.

    Files are only written once every output has rendered, so a failure
    leaves existing files untouched. Existing files are overwritten.
    """
    files = render(output_dir, protos, language=language, **options)

    for path, content in files.items():
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)

    return list(files)
