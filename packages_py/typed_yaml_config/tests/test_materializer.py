from enum import Enum
from pathlib import Path

import pytest

from typed_yaml_config import (
    InMemoryLocator,
    materialize,
    materialize_enum,
    meta_of,
    new_context,
)
from sample_schemas import AppConfig, ChildConfig, Mode, NestedConfig, RootConfig, SectionConfig


@pytest.fixture
def context_for():
    def build(files=None, base_dir="/cfg"):
        return new_context(base_dir=Path(base_dir), locator=InMemoryLocator(files or {}))
    return build


class TestMaterialize:
    def test_empty_document_gives_defaults(self, context_for):
        assert materialize(AppConfig, None, context_for()) == AppConfig()
        assert materialize(AppConfig, {}, context_for()) == AppConfig()

    def test_non_mapping_root_gives_defaults(self, context_for):
        context = context_for()
        assert materialize(AppConfig, [1, 2, 3], context) == AppConfig()
        assert context.result.defaulted_fields == ["<root>"]

    def test_partial_document(self, context_for):
        config = materialize(AppConfig, {"amount": 3, "brightness": "bright", "mode": "Option1"}, context_for())
        assert config.amount == 3
        assert config.brightness == 1.0
        assert config.mode is Mode.Option1
        assert config.name == "app"

    def test_unknown_keys_are_ignored(self, context_for):
        assert materialize(AppConfig, {"unknown": 1}, context_for()) == AppConfig()

    def test_soft_failures_reported_with_paths(self, context_for):
        context = context_for()
        materialize(AppConfig, {"brightness": "bright", "nested": {"label": 5}}, context)
        assert context.result.defaulted_fields == ["brightness", "nested.label"]

    def test_every_field_populated(self, context_for):
        config = materialize(AppConfig, {"nested": {"label": "x"}}, context_for())
        assert config.nested.some_field == (1, 2, 3)
        assert config.nested.label == "x"

    def test_without_context(self):
        assert materialize(NestedConfig, {"label": "plain"}).label == "plain"


class TestExternFields:
    def test_nested_extern(self, context_for):
        context = context_for({"/cfg/nested.yml": "label: from-file\n"})
        config = materialize(AppConfig, {"nested": "extern"}, context)

        assert config.nested == NestedConfig(label="from-file")
        assert meta_of(config).externs == {"nested": Path("/cfg/nested.yml")}
        assert meta_of(config.nested).path == Path("/cfg/nested.yml")
        assert context.result.externs_resolved == {"nested": "/cfg/nested.yml"}

    def test_scalar_field_can_be_extern(self, context_for):
        context = context_for({"/cfg/tags.yml": "- x\n- y\n"})
        config = materialize(AppConfig, {"tags": "extern"}, context)
        assert config.tags == ["x", "y"]
        assert meta_of(config).is_extern("tags")

    def test_missing_extern_defaults(self, context_for):
        context = context_for()
        config = materialize(AppConfig, {"nested": "extern", "amount": 1}, context)
        assert config.nested == NestedConfig()
        assert config.amount == 1
        assert meta_of(config).externs == {}
        assert context.result.defaulted_fields == ["nested"]

    def test_extern_file_of_wrong_kind_defaults(self, context_for):
        context = context_for({"/cfg/nested.yml": "- 1\n- 2\n"})
        config = materialize(AppConfig, {"nested": "extern"}, context)
        assert config.nested == NestedConfig()

    def test_nested_externs_resolve_relative_to_extern_file(self, context_for):
        context = context_for({
            "/cfg/section/config.yml": "title: s\nchild: extern\n",
            "/cfg/section/child.yml": "value: 3\n",
            "/cfg/child.yml": "value: 99\n",
        })
        config = materialize(RootConfig, {"section": "extern"}, context)
        assert config.section == SectionConfig(title="s", child=ChildConfig(value=3))
        assert meta_of(config.section).externs == {"child": Path("/cfg/section/child.yml")}

    def test_extern_inside_inline_section(self, context_for):
        context = context_for({"/cfg/child.yml": "value: 4\n"})
        config = materialize(RootConfig, {"section": {"child": "extern"}}, context)
        assert config.section.child.value == 4
        assert meta_of(config).externs == {}
        assert meta_of(config.section).externs == {"child": Path("/cfg/child.yml")}


class Color(Enum):
    Red = "red"
    Green = "green"


class TestMaterializeEnum:
    def test_matches_member_name(self):
        assert materialize_enum(Mode, "Option1", Mode.Option2) is Mode.Option1

    def test_unknown_label_falls_back(self):
        assert materialize_enum(Mode, "Option3", Mode.Option2) is Mode.Option2

    def test_case_sensitive(self):
        assert materialize_enum(Color, "red", Color.Green) is Color.Green

    def test_non_string_node(self):
        assert materialize_enum(Mode, ["Option1"], Mode.Option2) is Mode.Option2

    def test_default_is_first_member(self):
        assert materialize_enum(Color, None) is Color.Red
