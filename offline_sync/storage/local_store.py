"""
Local key/value storage for the pending queue.

Values are strings, mirroring browser localStorage. FileLocalStore keeps
one file per key so the queue survives process restarts.
"""
import logging
import os
import tempfile
from typing import Dict, Optional, Protocol, runtime_checkable
from urllib.parse import quote

logger = logging.getLogger(__name__)


@runtime_checkable
class LocalStore(Protocol):
    """Synchronous string key/value store."""
    
    def get(self, key: str) -> Optional[str]:
        ...
    
    def set(self, key: str, value: str) -> None:
        ...
    
    def remove(self, key: str) -> None:
        ...


class InMemoryLocalStore:
    """LocalStore backed by a dict; contents are lost with the process."""
    
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})
    
    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)
    
    def set(self, key: str, value: str) -> None:
        self._values[key] = value
    
    def remove(self, key: str) -> None:
        self._values.pop(key, None)
    
    def __contains__(self, key: str) -> bool:
        return key in self._values


class FileLocalStore:
    """
    LocalStore persisting each key to its own file under a directory.
    
    Writes go to a temporary file in the same directory which then
    replaces the target, so a crash mid-write never leaves a truncated
    value behind.
    """
    
    def __init__(self, directory: str):
        """
        Initialize file-backed store.
        
        Args:
            directory: Directory holding one file per key (created if missing)
        """
        self.directory = directory
        os.makedirs(directory, exist_ok=True)
    
    def _path_for(self, key: str) -> str:
        if not key:
            raise ValueError("Storage key must not be empty")
        return os.path.join(self.directory, quote(key, safe='') + '.json')
    
    def get(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return f.read()
        except FileNotFoundError:
            return None
    
    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix='.tmp-')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(value)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        except OSError:
            logger.error(f"Failed to write local storage key {key}", exc_info=True)
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
    
    def remove(self, key: str) -> None:
        try:
            os.remove(self._path_for(key))
        except FileNotFoundError:
            pass
