"""
Document path helpers.

Paths address a document as 'collection/docId'. Sub-collections are
allowed ('users/u1/notes/n1'), so a valid path always has an even number
of non-empty segments.
"""

from typing import Tuple

from .exceptions import InvalidPathError


def split_path(path: str) -> Tuple[str, str]:
    """
    Split a document path into its collection path and document id.
    
    Args:
        path: Document path (e.g. 'videoSessions/abc123')
        
    Returns:
        Tuple of (collection_path, document_id)
        
    Raises:
        InvalidPathError: If the path is empty or does not address a document
    """
    if not isinstance(path, str) or not path:
        raise InvalidPathError('Document path must be a non-empty string')
    
    segments = path.split('/')
    if any(not segment for segment in segments):
        raise InvalidPathError(f'Document path contains empty segments: {path!r}')
    
    if len(segments) % 2 != 0:
        raise InvalidPathError(
            f'Document path must have an even number of segments: {path!r}'
        )
    
    return '/'.join(segments[:-1]), segments[-1]


def join_path(collection: str, document_id: str) -> str:
    """
    Build a document path from a collection and a document id.
    
    Raises:
        InvalidPathError: If the resulting path is malformed
    """
    path = f'{collection}/{document_id}'
    split_path(path)
    return path


def validate_path(path: str) -> str:
    """Validate a document path and return it unchanged."""
    split_path(path)
    return path
