"""
Result formatter: optional reshaping of the aggregated results.
"""

from typing import Any, Dict, List, Union

RESERVED_KEYS = ("address", "namespace")

FormattedResult = Union[List[Dict[str, Any]], Dict[str, List[Dict[str, Any]]]]


def simplify(entries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Collapse single-valued method results to their bare value.

    A method list is replaced by its value only when it holds exactly one
    result whose value is truthy. Applying this twice is a no-op.
    """
    simplified = []
    for entry in entries:
        entry = dict(entry)
        for key, results in entry.items():
            if key in RESERVED_KEYS or not isinstance(results, list):
                continue
            if len(results) == 1 and isinstance(results[0], dict):
                value = results[0].get("value")
                if value:
                    entry[key] = value
        simplified.append(entry)
    return simplified


def group_by_namespace(entries: List[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    """Partition entries by namespace, dropping the namespace key."""
    grouped: Dict[str, List[Dict[str, Any]]] = {}
    for entry in entries:
        entry = dict(entry)
        namespace = entry.pop("namespace")
        grouped.setdefault(namespace, []).append(entry)
    return grouped


class ResultFormatter:
    """Applies the simplify and group-by-namespace passes, in that order."""

    def __init__(self, simplify_response: bool = False, group_by_namespace: bool = False):
        self.simplify_response = simplify_response
        self.group_by_namespace = group_by_namespace

    def format(self, entries: List[Dict[str, Any]]) -> FormattedResult:
        if self.simplify_response:
            entries = simplify(entries)
        if self.group_by_namespace:
            return group_by_namespace(entries)
        return entries
