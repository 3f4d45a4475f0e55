"""
Static checks for generated game code

Two levels of problems are reported. Code that does not parse as
JavaScript is fatal. Code that parses but seems to lack part of the
expected Phaser game structure only produces warnings.

Parsing uses the tree-sitter JavaScript grammar, which tracks the
current language edition (``a?.b``, ``a ?? b``, ``catch {}``, class
fields). A syntax problem is any ERROR or MISSING node in the tree.
"""

import logging
import re

import tree_sitter_javascript
from tree_sitter import Language, Node, Parser

from game_maker.models.agent import CodeValidation

logger = logging.getLogger(__name__)

JAVASCRIPT = Language(tree_sitter_javascript.language())

# Cap on reported syntax problems; one is enough to fail the game
MAX_SYNTAX_ERRORS = 5

# (markers, warning) - any one marker present satisfies the check
REQUIRED_ELEMENTS: list[tuple[tuple[str, ...], str]] = [
    (("config",), "Missing game config"),
    (("function preload",), "Missing preload function"),
    (("function create",), "Missing create function"),
    (("function update",), "Missing update function"),
    (("Play Again", "play again"), "Missing Play Again button"),
]

_FENCED_BLOCK_RE = re.compile(r"```[ \t]*(?:javascript|js|JavaScript)?[ \t]*\n([\s\S]*?)```")


def clean_code_content(text: str) -> str:
    """
    Strip markdown from a model's code reply.

    When the reply contains fenced blocks the longest one is taken
    (models sometimes add a short usage example); otherwise any stray
    fence markers are removed.
    """
    blocks = _FENCED_BLOCK_RE.findall(text)
    if blocks:
        return max(blocks, key=len).strip()
    cleaned = re.sub(r"```(?:javascript|js)?", "", text)
    return cleaned.strip()


def _problem_nodes(root: Node) -> list[Node]:
    """ERROR and MISSING nodes in source order, without descending into errors"""
    found: list[Node] = []
    stack = [root]
    while stack and len(found) < MAX_SYNTAX_ERRORS:
        node = stack.pop()
        if node.is_error or node.is_missing:
            found.append(node)
            continue
        if node.has_error:
            stack.extend(reversed(node.children))
    return found


def _describe(node: Node) -> str:
    line = node.start_point[0] + 1
    column = node.start_point[1] + 1
    if node.is_missing:
        return f"Line {line}:{column}: missing '{node.type}'"
    snippet = (node.text or b"").decode("utf-8", errors="replace").strip().splitlines()
    near = snippet[0][:40] if snippet else ""
    return f"Line {line}:{column}: unexpected '{near}'" if near else f"Line {line}:{column}: unexpected input"


def syntax_errors(code: str) -> list[str]:
    """Parse ``code`` as a script and return any syntax errors"""
    tree = Parser(JAVASCRIPT).parse(code.encode("utf-8"))
    if not tree.root_node.has_error:
        return []
    problems = _problem_nodes(tree.root_node) or [tree.root_node]
    return [f"Syntax error: {_describe(node)}" for node in problems]


def validate_code(code: str) -> CodeValidation:
    """
    Check that generated code parses and looks like a complete game.

    Example:
        >>> validate_code("function preload() {").is_valid
        False
    """
    if not code or not code.strip():
        return CodeValidation(is_valid=False, errors=["Generated code is empty"])

    errors = syntax_errors(code)
    if errors:
        logger.warning(f"Generated code failed to parse: {errors[0]}")
        return CodeValidation(is_valid=False, errors=errors)

    warnings = [
        warning
        for markers, warning in REQUIRED_ELEMENTS
        if not any(marker in code for marker in markers)
    ]
    if warnings:
        logger.info(f"Generated code is missing elements: {warnings}")
    return CodeValidation(is_valid=True, warnings=warnings)
