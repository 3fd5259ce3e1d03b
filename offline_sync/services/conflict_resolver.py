"""
Field-level merge of a buffered local write against the remote document.

The rule is a heuristic, not a CRDT: arrays are unioned and maps are
merged recursively, but any other field takes the local value, so two
clients editing the same scalar offline will clobber each other.
"""
import copy
from typing import Any, Dict, List, Mapping


def _union(local: List[Any], remote: List[Any]) -> List[Any]:
    """Local items in order, then remote items not already present."""
    merged: List[Any] = []
    for item in list(local) + list(remote):
        # Items may be unhashable (maps, lists), so compare by equality
        if item not in merged:
            merged.append(copy.deepcopy(item))
    return merged


def resolve_conflict(local: Mapping[str, Any], remote: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Merge local fields into the remote document.
    
    Starts from the remote document and applies each local field:
    - both values are lists: union without duplicates
    - both values are maps: merged recursively with this rule
    - otherwise: the local value wins
    
    Fields present only remotely are preserved. Neither input is mutated.
    
    Args:
        local: Buffered payload
        remote: Current remote document
        
    Returns:
        Merged document
        
    Examples:
        >>> resolve_conflict({'tags': ['a', 'b']}, {'tags': ['b', 'c']})
        {'tags': ['a', 'b', 'c']}
    """
    merged = copy.deepcopy(dict(remote))
    
    for key, local_value in local.items():
        remote_value = remote.get(key)
        
        if isinstance(local_value, list) and isinstance(remote_value, list):
            merged[key] = _union(local_value, remote_value)
        elif isinstance(local_value, Mapping) and isinstance(remote_value, Mapping):
            merged[key] = resolve_conflict(local_value, remote_value)
        else:
            merged[key] = copy.deepcopy(local_value)
    
    return merged
