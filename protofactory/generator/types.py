"""Type definitions for annotation scanning and code generation."""

from dataclasses import dataclass, field

from dataclasses_json import DataClassJsonMixin


class GeneratorError(RuntimeError):
    """Base class for errors that abort a generator run."""


class EmitError(GeneratorError):
    """Raised when collected messages cannot be turned into valid source."""


@dataclass(frozen=True)
class MessageMetadata(DataClassJsonMixin):
    """A message declaration paired with its id annotation.

    `id` keeps the literal as written in the schema (e.g. "0x00A1"). `line`
    is the 1-based line of the declaration, 0 when unknown.
    """

    name: str
    id: str
    line: int = 0

    @property
    def number(self) -> int:
        return int(self.id, 16)

    @property
    def literal(self) -> str:
        """The id as a hex literal with a lowercase `0x` prefix."""
        return "0x" + self.id[2:]


@dataclass(frozen=True)
class ProtoMessageInfo(DataClassJsonMixin):
    """Messages discovered in a single schema file."""

    file_path: str
    file_name: str
    messages: list[MessageMetadata] = field(default_factory=list)
