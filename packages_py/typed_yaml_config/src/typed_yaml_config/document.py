"""Document tree: the generic node representation of a parsed YAML file.

Nodes are the plain Python values PyYAML produces (None, bool, int, float,
str, list, dict). ``kind_of`` maps a node onto the closed ``NodeKind`` set;
anything outside that set has no kind and never coerces.
"""

from enum import Enum
from typing import Any, Optional

import yaml


class NodeKind(Enum):
    NULL = "null"
    BOOL = "bool"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def kind_of(node: Any) -> Optional[NodeKind]:
    """Classify a node. Returns None for values outside the node model."""
    if node is None:
        return NodeKind.NULL
    # bool before int: bool is an int subclass
    if isinstance(node, bool):
        return NodeKind.BOOL
    if isinstance(node, int):
        return NodeKind.INTEGER
    if isinstance(node, float):
        return NodeKind.FLOAT
    if isinstance(node, str):
        return NodeKind.STRING
    if isinstance(node, list):
        return NodeKind.SEQUENCE
    if isinstance(node, dict):
        return NodeKind.MAPPING
    return None


class DocumentLoader(yaml.SafeLoader):
    """Safe loader without the implicit timestamp resolver.

    Dates stay strings so every parsed value is one of the ``NodeKind`` kinds.
    """


DocumentLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


class DocumentDumper(yaml.SafeDumper):
    """Safe dumper that indents sequences under their parent key."""

    def increase_indent(self, flow: bool = False, indentless: bool = False):
        return super().increase_indent(flow, False)


def parse_document(text: str) -> Any:
    """Parse YAML text into a node. Raises ``yaml.YAMLError`` on bad syntax.

    Only the first document of a multi-document stream is used; an empty
    stream yields None.
    """
    for document in yaml.load_all(text, Loader=DocumentLoader):
        return document
    return None


def render_document(node: Any) -> str:
    """Render a node as block-style YAML, preserving mapping order."""
    return yaml.dump(
        node,
        Dumper=DocumentDumper,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
