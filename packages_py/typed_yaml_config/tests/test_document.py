import pytest
import yaml

from typed_yaml_config import NodeKind, kind_of, parse_document, render_document


class TestKindOf:
    @pytest.mark.parametrize("node,kind", [
        (None, NodeKind.NULL),
        (True, NodeKind.BOOL),
        (0, NodeKind.INTEGER),
        (1.5, NodeKind.FLOAT),
        ("x", NodeKind.STRING),
        ([], NodeKind.SEQUENCE),
        ({}, NodeKind.MAPPING),
    ])
    def test_node_kinds(self, node, kind):
        assert kind_of(node) is kind

    def test_values_outside_model(self):
        assert kind_of(b"bytes") is None
        assert kind_of({1, 2}) is None
        assert kind_of((1, 2)) is None


class TestParse:
    def test_mapping(self):
        assert parse_document("a: 1\nb: [x, y]\n") == {"a": 1, "b": ["x", "y"]}

    def test_empty(self):
        assert parse_document("") is None
        assert parse_document("# only a comment\n") is None

    def test_first_document_only(self):
        assert parse_document("a: 1\n---\na: 2\n") == {"a": 1}

    def test_timestamps_stay_strings(self):
        node = parse_document("day: 2001-12-14\nstamp: 2001-12-14t21:59:43.10-05:00\n")
        assert node == {"day": "2001-12-14", "stamp": "2001-12-14t21:59:43.10-05:00"}

    def test_scalars(self):
        node = parse_document("t: true\nn: ~\ni: 0x10\nf: 1e3\nneg: -.inf\n")
        assert node["t"] is True
        assert node["n"] is None
        assert node["i"] == 16
        assert node["f"] == "1e3"  # YAML 1.1 floats need a dot
        assert node["neg"] == float("-inf")

    def test_syntax_error(self):
        with pytest.raises(yaml.YAMLError):
            parse_document("a: [1, 2\n")

    def test_unsafe_tags_rejected(self):
        with pytest.raises(yaml.YAMLError):
            parse_document("a: !!python/object:os.system {}\n")


class TestRender:
    def test_preserves_key_order(self):
        assert render_document({"b": 1, "a": 2}) == "b: 1\na: 2\n"

    def test_block_style(self):
        text = render_document({"items": ["x", "y"], "nested": {"k": "v"}})
        assert text == "items:\n  - x\n  - y\nnested:\n  k: v\n"

    def test_quotes_ambiguous_strings(self):
        node = {"a": "true", "b": "2001-12-14", "c": "12", "d": "extern"}
        assert parse_document(render_document(node)) == node
