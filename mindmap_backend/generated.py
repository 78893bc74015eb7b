"""
Reading externally generated mindmap descriptions.

Generators usually answer with a JSON object, often wrapped in a markdown
code fence and surrounded by prose. This pulls out the `{nodes, edges}`
object; the records themselves are validated later, on layout and commit.
"""

import json
import re

_FENCED_JSON = re.compile(r"```json\n([\s\S]*?)\n```")
_FENCED = re.compile(r"```\n([\s\S]*?)\n```")
_BARE_OBJECT = re.compile(r"{[\s\S]*}")


class GeneratedMindmapError(ValueError):
    """The text holds no usable mindmap description."""


def extract_json_text(content: str) -> str:
    """Return the most likely JSON part of `content`."""
    for pattern in (_FENCED_JSON, _FENCED):
        match = pattern.search(content)
        if match:
            return match.group(1)
    match = _BARE_OBJECT.search(content)
    return match.group(0) if match else content


def parse_generated_mindmap(content: str) -> tuple[list, list]:
    """
    Parse generated text into raw (nodes, edges) lists.

    Raises:
        GeneratedMindmapError: no JSON object, or it lacks node/edge lists
    """
    text = extract_json_text(content).replace("```", "").strip()
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise GeneratedMindmapError(f"Generated mindmap is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise GeneratedMindmapError("Generated mindmap must be a JSON object")

    nodes = data.get("nodes")
    edges = data.get("edges")
    if not isinstance(nodes, list) or not isinstance(edges, list):
        raise GeneratedMindmapError("Generated mindmap is missing 'nodes' or 'edges' lists")

    return nodes, edges
