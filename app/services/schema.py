"""JSON-LD structured data detection."""

import json
import logging
from typing import Any, Iterable, List

from bs4 import BeautifulSoup

from app.models.signals import SchemaInfo

logger = logging.getLogger(__name__)

LD_JSON_TYPE = "application/ld+json"


def _is_ld_json(value) -> bool:
    return bool(value) and str(value).strip().lower() == LD_JSON_TYPE


def _types_of(node: Any) -> Iterable[str]:
    """Yield every ``@type`` declared by *node*, its list items and ``@graph`` members."""
    if isinstance(node, list):
        for item in node:
            yield from _types_of(item)
        return
    if not isinstance(node, dict):
        return

    declared = node.get("@type")
    if isinstance(declared, str) and declared:
        yield declared
    elif isinstance(declared, list):
        for value in declared:
            if isinstance(value, str) and value:
                yield value

    graph = node.get("@graph")
    if isinstance(graph, list):
        yield from _types_of(graph)


def detect_schema(soup: BeautifulSoup) -> SchemaInfo:
    """Parse every ld+json block independently; malformed blocks are skipped."""
    count = 0
    types: List[str] = []

    for script in soup.find_all("script", attrs={"type": _is_ld_json}):
        raw = script.string if script.string is not None else script.get_text()
        try:
            payload = json.loads(raw)
        except (TypeError, ValueError):
            logger.debug("Skipping malformed JSON-LD block")
            continue
        count += 1
        for schema_type in _types_of(payload):
            if schema_type not in types:
                types.append(schema_type)

    return SchemaInfo(detected=count > 0, count=count, types=types)
