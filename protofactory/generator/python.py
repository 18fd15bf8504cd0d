"""Python code generator for message id factories."""

import keyword
from pathlib import Path

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

factory_template = env.get_template("python_factory.py.j2")
protos_template = env.get_template("python_protos.py.j2")

# protoc names generated modules `<stem>_pb2`.
MODULE_SUFFIX = "_pb2"

REGISTRY_CLASSES = {
    "shared": "Registry",
    "thread": "ThreadLocalRegistry",
}


def is_identifier(name: str) -> bool:
    """Check if `name` can be used as a Python module or class name."""
    return name.isidentifier() and not keyword.iskeyword(name)


def render(
    protos: list[ProtoMessageInfo],
    *,
    runtime_import: str = "protofactory.runtime",
    registry: str = "shared",
    module_suffix: str = MODULE_SUFFIX,
) -> tuple[str, str]:
    """Render the factory and package `__init__` sources.

    Args:
        protos: Collected schema files, in discovery order.
        runtime_import: Module providing `Registry` and `ThreadLocalRegistry`.
        registry: "shared" or "thread", see `protofactory.runtime`.
        module_suffix: Suffix protoc appends to generated module names.

    Returns:
        The contents of `factory.py` and `__init__.py`.
    """
    if registry not in REGISTRY_CLASSES:
        raise EmitError(f"Unknown registry scope {registry}")

    def module(proto: ProtoMessageInfo) -> str:
        return f"{proto.file_name}{module_suffix}"

    exports = ["factory", "get_descriptor", "get_id"]
    exports.extend(module(proto) for proto in protos)
    exports.extend(message.name for proto in protos for message in proto.messages)

    factory = factory_template.render(
        protos=protos,
        module=module,
        runtime_import=runtime_import,
        registry_class=REGISTRY_CLASSES[registry],
        has_messages=any(proto.messages for proto in protos),
    )
    aggregator = protos_template.render(protos=protos, module=module, exports=exports)
    return factory, aggregator


def render_files(
    output_dir: str | Path,
    protos: list[ProtoMessageInfo],
    *,
    runtime_import: str = "protofactory.runtime",
    registry: str = "shared",
    module_suffix: str = MODULE_SUFFIX,
) -> dict[Path, str]:
    """Render the generated files keyed by their destination path."""
    factory, aggregator = render(
        protos, runtime_import=runtime_import, registry=registry, module_suffix=module_suffix
    )
    out = Path(output_dir)
    return {
        out / "factory.py": factory,
        out / "__init__.py": aggregator,
    }
