# markup_parser.py
import argparse
import logging
import re
import sys
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

# Characters allowed in tag and attribute names.
TAG_NAME = r"[a-zA-Z0-9_\-]+"
# An opening tag at the very start of the input: <name attrs>
# Only a literal '>' may follow the attribute text.
TAG_OPEN = re.compile(r"^<(" + TAG_NAME + r")((?:\s[^>]*)?)>", re.ASCII)
# Only double-quoted values are recognised. Names start at a word boundary.
ATTRIBUTE = re.compile(r"(?<![a-zA-Z0-9_\-])(" + TAG_NAME + r')\s*=\s*"([^"]*)"', re.ASCII)
# Spaces added per level by print_tree.
INDENT_STEP = 2


class MalformedMarkup(ValueError):
    """Base class for every error raised while parsing markup."""


class InvalidTagStart(MalformedMarkup):
    def __init__(self, text: str):
        self.text = text
        preview = text if len(text) <= 40 else text[:40] + "..."
        super().__init__(f"invalid tag start: {preview!r}")


class UnclosedTag(MalformedMarkup):
    def __init__(self, tag: str):
        self.tag = tag
        super().__init__(f"no closing tag for <{tag}>")


class MaxDepthExceeded(MalformedMarkup):
    """
    Raised when nesting goes past max_depth, or past what the interpreter's
    recursion limit allows (max_depth is None then).
    """

    def __init__(self, max_depth: Optional[int]):
        self.max_depth = max_depth
        if max_depth is None:
            super().__init__("markup nested too deeply to parse")
        else:
            super().__init__(f"markup nested deeper than {max_depth} levels")


class Node:
    def __init__(self, tag: str, attributes: Dict[str, str],
                 children: List["Node"], text: str):
        self.tag = tag
        self.attributes = attributes
        self.children = children
        self.text = text

    def __eq__(self, other):
        if not isinstance(other, Node):
            return NotImplemented
        return (self.tag == other.tag
                and self.attributes == other.attributes
                and self.children == other.children
                and self.text == other.text)

    def __repr__(self):
        if self.attributes:
            attr_str = " ".join(f'{k}="{v}"' for k, v in self.attributes.items())
            return f"<{self.tag} {attr_str}>"
        return "<" + self.tag + ">"


def parse_attributes(raw: str) -> Dict[str, str]:
    """
    Collect name="value" pairs from the text between a tag name and '>'.
    Anything that does not look like a double-quoted pair is ignored.
    """
    attributes = {}
    for name, value in ATTRIBUTE.findall(raw):
        attributes[name] = value
    return attributes


def parse_node(text: str, depth: int = 0,
               max_depth: Optional[int] = None) -> Tuple[Node, int]:
    """
    Parse the element opening at the start of 'text'.

    Returns the node and the number of characters consumed up to and
    including its closing tag. The closing tag is the first literal
    '</name>' after the opening tag, so a nested element with the same
    name closes its ancestor early.

    Root elements sit at depth 0; with max_depth set, an element deeper
    than max_depth raises MaxDepthExceeded.
    """
    if max_depth is not None and depth > max_depth:
        raise MaxDepthExceeded(max_depth)
    match = TAG_OPEN.match(text)
    if match is None:
        raise InvalidTagStart(text)
    tag, raw_attributes = match.group(1), match.group(2)
    attributes = parse_attributes(raw_attributes)

    offset = match.end()
    rest = text[offset:]
    end_tag = "</" + tag + ">"
    end = rest.find(end_tag)
    if end == -1:
        raise UnclosedTag(tag)

    children, body_text = parse_children(rest[:end], depth + 1, max_depth)
    node = Node(tag, attributes, children, body_text)
    return node, offset + end + len(end_tag)


def parse_children(body: str, depth: int = 0,
                   max_depth: Optional[int] = None) -> Tuple[List[Node], str]:
    """
    Split an element body into child nodes and the text between them.

    A child that fails to parse ends the scan: the children and text found
    before it are kept and the rest of the body is dropped.
    """
    children = []
    text = ""
    while True:
        body = body.strip()
        if not body:
            break
        if body[0] != "<":
            i = body.find("<")
            if i == -1:
                text += body
                break
            text += body[:i]
            body = body[i:]
            continue
        try:
            node, consumed = parse_node(body, depth, max_depth)
        except MaxDepthExceeded:
            raise
        except MalformedMarkup as e:
            logger.debug("Stopped scanning element body: %s", e)
            break
        children.append(node)
        body = body[consumed:]
    return children, text.strip()


def parse_markup(text: str, max_depth: Optional[int] = None) -> List[Node]:
    """
    Parse a markup document into a list of root nodes.

    Text outside of root-level elements is skipped. The first element that
    fails to parse aborts the whole parse with a MalformedMarkup error.
    Nesting deep enough to exhaust the Python stack raises MaxDepthExceeded.
    """
    try:
        return _parse_roots(text, max_depth)
    except RecursionError:
        raise MaxDepthExceeded(None) from None


def _parse_roots(text: str, max_depth: Optional[int]) -> List[Node]:
    nodes = []
    while True:
        text = text.strip()
        if not text:
            break
        if text[0] != "<":
            i = text.find("<")
            if i == -1:
                logger.debug("Dropped trailing text: %r", text)
                break
            text = text[i:]
            continue
        node, consumed = parse_node(text, 0, max_depth)
        nodes.append(node)
        text = text[consumed:]
    return nodes


parse = parse_markup


def format_tree(node: Node, indent: int = 0) -> str:
    lines = []
    prefix = " " * indent
    lines.append(f"{prefix}<Tag={node.tag} Attrs={node.attributes} Text={node.text!r}>")
    for child in node.children:
        lines.append(format_tree(child, indent + INDENT_STEP))
    return "\n".join(lines)


def print_tree(node: Node, indent: int = 0, file=None):
    print(format_tree(node, indent), file=file)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="markup-tree",
        description="Parse HTML-like markup and print the resulting node trees.",
    )
    parser.add_argument("path", nargs="?", default="-",
                        help="file to read, or '-' for standard input")
    parser.add_argument("--max-depth", type=int, default=None,
                        help="fail on markup nested deeper than this")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="log parser diagnostics")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    if args.path == "-":
        body = sys.stdin.read()
    else:
        with open(args.path, encoding="utf-8") as f:
            body = f.read()

    try:
        roots = parse_markup(body, max_depth=args.max_depth)
    except MalformedMarkup as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    for root in roots:
        print_tree(root)
    return 0


if __name__ == "__main__":
    sys.exit(main())
