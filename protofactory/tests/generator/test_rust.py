"""Tests for the Rust factory generator."""

from pathlib import Path

import pytest

from protofactory.generator import rust
from protofactory.generator.types import EmitError, MessageMetadata, ProtoMessageInfo

SHAPES = ProtoMessageInfo(
    file_path="src/protos/shapes.proto",
    file_name="shapes",
    messages=[
        MessageMetadata(name="Circle", id="0x0001", line=2),
        MessageMetadata(name="Square", id="0x0002", line=4),
    ],
)
ANIMALS = ProtoMessageInfo(
    file_path="src/protos/animals.proto",
    file_name="animals",
    messages=[MessageMetadata(name="Cat", id="0X00aF", line=2)],
)


def describe_is_identifier():
    def accepts_module_and_type_names(expect):
        expect(rust.is_identifier("shapes")) == True
        expect(rust.is_identifier("Circle")) == True
        expect(rust.is_identifier("_private2")) == True

    def rejects_invalid_names(expect):
        expect(rust.is_identifier("my-file")) == False
        expect(rust.is_identifier("2d")) == False
        expect(rust.is_identifier("_")) == False
        expect(rust.is_identifier("Circle{")) == False

    def rejects_keywords(expect):
        expect(rust.is_identifier("type")) == False
        expect(rust.is_identifier("mod")) == False


def describe_module_path():
    def drops_source_directory(expect):
        expect(rust.module_path("src/protos")) == "crate::protos"
        expect(rust.module_path("src/net/protos")) == "crate::net::protos"

    def uses_prefix(expect):
        expect(rust.module_path("src/protos", prefix="my_crate")) == "my_crate::protos"

    def normalizes_path(expect):
        expect(rust.module_path("./src/protos/")) == "crate::protos"

    def resolves_against_source_root(expect):
        expect(rust.module_path("gen/src/protos", source_root="gen/src")) == "crate::protos"

    def fails_outside_source_root(expect):
        with pytest.raises(EmitError):
            rust.module_path("other/protos", source_root="src")

    def fails_on_invalid_segment(expect):
        with pytest.raises(EmitError):
            rust.module_path("src/my-protos")


def describe_render():
    def registers_messages_in_discovery_order(expect):
        factory, _ = rust.render([SHAPES, ANIMALS], module_path="crate::protos")
        circle = factory.index("register::<shapes::Circle>(0x0001);")
        square = factory.index("register::<shapes::Square>(0x0002);")
        cat = factory.index("register::<animals::Cat>(0x00aF);")
        expect(circle < square < cat) == True

    def imports_each_module_before_registrations(expect):
        factory, _ = rust.render([SHAPES, ANIMALS], module_path="crate::protos")
        expect("use crate::protos::shapes;\nuse crate::protos::animals;\n" in factory) == True
        expect(factory.index("use crate::protos::animals;") < factory.index("fn init_descriptors")) == True

    def encloses_registrations_in_init_descriptors(expect):
        factory, _ = rust.render([SHAPES], module_path="crate::protos")
        body = factory[factory.index("fn init_descriptors") :]
        expect("register::<shapes::Circle>(0x0001);" in body) == True
        expect(body.rstrip().endswith("}")) == True

    def generates_shared_registry_by_default(expect):
        factory, _ = rust.render([SHAPES])
        expect("static REGISTRY: OnceLock<Registry>" in factory) == True
        expect("fn init_descriptors(registry: &mut Registry) {" in factory) == True
        expect("    registry.register::<shapes::Circle>(0x0001);" in factory) == True
        expect("thread_local!" in factory) == False

    def generates_thread_local_registry(expect):
        factory, _ = rust.render([SHAPES], registry="thread")
        expect("thread_local!" in factory) == True
        expect("fn init_descriptors() {" in factory) == True
        expect("    register::<shapes::Circle>(0x0001);" in factory) == True
        expect("OnceLock" in factory) == False

    def registers_first_key_only(expect):
        factory, _ = rust.render([SHAPES])
        expect(".or_insert(id);" in factory) == True
        expect(".or_insert(descriptor);" in factory) == True

    def rejects_unknown_registry_scope(expect):
        with pytest.raises(EmitError):
            rust.render([SHAPES], registry="global")

    def aggregates_modules_and_messages(expect):
        _, protos = rust.render([SHAPES, ANIMALS])
        lines = protos.splitlines()
        expect(lines[1:]) == [
            "pub mod factory;",
            "pub mod shapes;",
            "pub mod animals;",
            "",
            "pub use factory::get_id;",
            "pub use factory::get_descriptor;",
            "pub use shapes::Circle;",
            "pub use shapes::Square;",
            "pub use animals::Cat;",
        ]

    def separates_factory_sections_with_blank_lines(expect):
        for registry in rust.REGISTRY_SCOPES:
            factory, _ = rust.render([SHAPES], module_path="crate::protos", registry=registry)
            expect("HashMap;\n" in factory) == True
            expect(";\n\nuse protobuf::reflect::MessageDescriptor;" in factory) == True
            expect("}\n\nuse crate::protos::shapes;\n\nfn init_descriptors" in factory) == True

    def renders_empty_input(expect):
        factory, protos = rust.render([])
        expect("fn init_descriptors(registry: &mut Registry) {\n}\n" in factory) == True
        expect("pub mod factory;" in protos) == True

    def is_deterministic(expect):
        expect(rust.render([SHAPES, ANIMALS])) == rust.render([SHAPES, ANIMALS])


def describe_render_files():
    def places_aggregator_next_to_output_directory(expect):
        files = rust.render_files("src/protos", [SHAPES])
        expect(set(files)) == {Path("src/protos.rs"), Path("src/protos/factory.rs")}
        expect("use crate::protos::shapes;" in files[Path("src/protos/factory.rs")]) == True
