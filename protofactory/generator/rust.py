"""Rust code generator for message id factories."""

import os
import re
from pathlib import Path, PurePath

from jinja2 import Environment, PackageLoader

from .types import EmitError, ProtoMessageInfo

env = Environment(
    loader=PackageLoader("protofactory.generator", "templates"),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    line_comment_prefix="%%",
    line_statement_prefix="%",
)

factory_template = env.get_template("rust_factory.rs.j2")
protos_template = env.get_template("rust_protos.rs.j2")

REGISTRY_SCOPES = ("shared", "thread")

# Generated modules are named after the schema file stem.
MODULE_SUFFIX = ""

KEYWORDS = frozenset(
    [
        # Strict
        "as",
        "async",
        "await",
        "break",
        "const",
        "continue",
        "crate",
        "dyn",
        "else",
        "enum",
        "extern",
        "false",
        "fn",
        "for",
        "if",
        "impl",
        "in",
        "let",
        "loop",
        "match",
        "mod",
        "move",
        "mut",
        "pub",
        "ref",
        "return",
        "self",
        "Self",
        "static",
        "struct",
        "super",
        "trait",
        "true",
        "type",
        "unsafe",
        "use",
        "where",
        "while",
        # Reserved
        "abstract",
        "become",
        "box",
        "do",
        "final",
        "gen",
        "macro",
        "override",
        "priv",
        "try",
        "typeof",
        "unsized",
        "virtual",
        "yield",
    ]
)

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def is_identifier(name: str) -> bool:
    """Check if `name` can be used as a Rust module or type name."""
    return bool(_IDENTIFIER.fullmatch(name)) and name != "_" and name not in KEYWORDS


def module_path(
    output_dir: str | Path, prefix: str = "crate", source_root: str | Path | None = None
) -> str:
    """Build the Rust path of the module generated into `output_dir`.

    Each directory below the crate's source root becomes one `::` segment
    after `prefix`. Without `source_root`, the first directory of
    `output_dir` is taken to be the source root (`src/protos` -> `crate::protos`).
    """
    path = PurePath(os.path.normpath(output_dir))

    if source_root is None:
        parts = path.parts[1:]
    else:
        try:
            parts = path.relative_to(os.path.normpath(source_root)).parts
        except ValueError:
            raise EmitError(f"{output_dir} is not inside source root {source_root}") from None

    for part in parts:
        if not is_identifier(part):
            raise EmitError(f"Output directory segment {part!r} is not a valid Rust module name")

    return "::".join([prefix, *parts])


def render(
    protos: list[ProtoMessageInfo],
    *,
    module_path: str = "crate",
    registry: str = "shared",
) -> tuple[str, str]:
    """Render the factory and module aggregator sources.

    Args:
        protos: Collected schema files, in discovery order.
        module_path: Rust path of the module holding the generated files.
        registry: "shared" for one process-wide registry built on first use,
                  "thread" for lazily built per-thread tables.

    Returns:
        The contents of `factory.rs` and `protos.rs`.
    """
    if registry not in REGISTRY_SCOPES:
        raise EmitError(f"Unknown registry scope {registry}")

    factory = factory_template.render(protos=protos, module_path=module_path, registry=registry)
    aggregator = protos_template.render(protos=protos)
    return factory, aggregator


def render_files(
    output_dir: str | Path,
    protos: list[ProtoMessageInfo],
    *,
    module_prefix: str = "crate",
    source_root: str | Path | None = None,
    registry: str = "shared",
) -> dict[Path, str]:
    """Render the generated files keyed by their destination path."""
    factory, aggregator = render(
        protos,
        module_path=module_path(output_dir, module_prefix, source_root),
        registry=registry,
    )
    out = Path(output_dir)
    return {
        out / "factory.rs": factory,
        Path(os.path.normpath(out / ".." / "protos.rs")): aggregator,
    }
