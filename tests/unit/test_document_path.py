"""
Unit tests for document path helpers.
"""

import pytest

from shared.data_access import InvalidPathError, join_path, split_path, validate_path


class TestSplitPath:
    """Test suite for split_path."""
    
    def test_collection_and_document(self):
        assert split_path('videoSessions/abc123') == ('videoSessions', 'abc123')
    
    def test_sub_collection(self):
        assert split_path('users/u1/notes/n1') == ('users/u1/notes', 'n1')
    
    @pytest.mark.parametrize('path', [
        '',
        'videoSessions',
        'videoSessions/',
        '/abc123',
        'a//b',
        'users/u1/notes',
    ])
    def test_rejects_malformed_paths(self, path):
        with pytest.raises(InvalidPathError):
            split_path(path)
    
    def test_rejects_non_string(self):
        with pytest.raises(InvalidPathError):
            split_path(None)
    
    def test_invalid_path_is_value_error(self):
        with pytest.raises(ValueError):
            split_path('lonely')


class TestJoinPath:
    """Test suite for join_path and validate_path."""
    
    def test_join(self):
        assert join_path('videoSessions', 's1') == 'videoSessions/s1'
    
    def test_join_rejects_empty_id(self):
        with pytest.raises(InvalidPathError):
            join_path('videoSessions', '')
    
    def test_validate_returns_path(self):
        assert validate_path('users/u1') == 'users/u1'
