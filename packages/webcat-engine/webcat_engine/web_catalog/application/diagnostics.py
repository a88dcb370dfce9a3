"""
Catalog diagnostics

Tools for comparing two extraction runs and for locating the graph nodes
behind an API that one run found and the other did not.
"""

from __future__ import annotations

import re

from webcat_engine.web_catalog.domain.models import CandidateNodes, Catalog, CatalogDiff
from webcat_engine.web_catalog.domain.ports import NodeId, ObjectGraphPort
from webcat_shared.common.exceptions import InvalidInputError


def catalog_to_api_ids(catalog: Catalog) -> list[str]:
    """Flatten to sorted "Interface#api" ids."""
    return [
        f"{interface_name}#{api_name}"
        for interface_name in sorted(catalog)
        for api_name in sorted(set(catalog[interface_name]))
    ]


def diff_catalogs(old: Catalog, new: Catalog) -> CatalogDiff:
    old_ids = set(catalog_to_api_ids(old))
    new_ids = set(catalog_to_api_ids(new))
    return CatalogDiff(
        missing=tuple(sorted(old_ids - new_ids)),
        added=tuple(sorted(new_ids - old_ids)),
    )


def split_api_id(api_id: str) -> tuple[str, str]:
    parts = api_id.split("#")
    if len(parts) != 2 or not all(parts):
        raise InvalidInputError('Expected API id of the form "Interface#api"', {"api_id": api_id})
    return parts[0], parts[1]


class _NeverMatches:
    def search(self, _string: str) -> None:
        return None


def _compile(pattern: str):
    try:
        return re.compile(pattern)
    except re.error:
        return _NeverMatches()


def find_candidate_nodes(graph: ObjectGraphPort, api_id: str) -> CandidateNodes:
    """
    Nodes whose graph paths mention an API.

    Tiers (a node lands in the tightest tier it matches):
        likely:   a path ends in "Interface.api"
        possible: a path contains "Interface" followed by "api"
        loose:    a path contains "api"

    Names are used as regular expressions; an invalid one matches nothing.
    """
    interface_name, api_name = split_api_id(api_id)
    tight = _compile(rf"{interface_name}\.{api_name}$")
    medium = _compile(f"{interface_name}.*{api_name}")
    loose = _compile(api_name)

    likely: list[NodeId] = []
    possible: list[NodeId] = []
    rest: list[NodeId] = []
    for node_id in graph.get_all_ids():
        keys = graph.get_keys(node_id)
        if any(tight.search(key) for key in keys):
            likely.append(node_id)
        elif any(medium.search(key) for key in keys):
            possible.append(node_id)
        elif any(loose.search(key) for key in keys):
            rest.append(node_id)
    return CandidateNodes(likely=tuple(likely), possible=tuple(possible), loose=tuple(rest))


def describe_node(graph: ObjectGraphPort, node_id: NodeId) -> list[str]:
    """Graph paths of a node, shortest first."""
    return sorted(graph.get_keys(node_id), key=len)
