"""
Unit tests for resolve_conflict.
"""

from offline_sync.services import resolve_conflict


class TestResolveConflict:
    """Test suite for the field-level merge."""
    
    def test_array_union(self):
        assert resolve_conflict({'tags': ['a', 'b']}, {'tags': ['b', 'c']}) == {'tags': ['a', 'b', 'c']}
    
    def test_array_union_has_no_duplicates(self):
        merged = resolve_conflict({'tags': ['a', 'a', 'b']}, {'tags': ['b', 'b']})
        
        assert sorted(merged['tags']) == ['a', 'b']
    
    def test_union_of_unhashable_items(self):
        merged = resolve_conflict(
            {'slots': [{'day': 'mon'}, {'day': 'tue'}]},
            {'slots': [{'day': 'tue'}, {'day': 'wed'}]}
        )
        
        assert merged['slots'] == [{'day': 'mon'}, {'day': 'tue'}, {'day': 'wed'}]
    
    def test_nested_maps_recurse(self):
        merged = resolve_conflict(
            {'profile': {'bio': 'new', 'skills': ['python']}},
            {'profile': {'bio': 'old', 'rate': 50, 'skills': ['go']}}
        )
        
        assert merged == {'profile': {'bio': 'new', 'rate': 50, 'skills': ['python', 'go']}}
    
    def test_scalar_local_wins(self):
        assert resolve_conflict({'name': 'local'}, {'name': 'remote'}) == {'name': 'local'}
    
    def test_type_mismatch_local_wins(self):
        assert resolve_conflict({'tags': 'a'}, {'tags': ['b']}) == {'tags': 'a'}
        assert resolve_conflict({'meta': {'x': 1}}, {'meta': 'flat'}) == {'meta': {'x': 1}}
    
    def test_remote_only_fields_preserved(self):
        assert resolve_conflict({'a': 1}, {'b': 2}) == {'a': 1, 'b': 2}
    
    def test_inputs_not_mutated(self):
        local = {'tags': ['a'], 'nested': {'x': [1]}}
        remote = {'tags': ['b'], 'nested': {'x': [2]}}
        
        merged = resolve_conflict(local, remote)
        merged['tags'].append('z')
        merged['nested']['x'].append(9)
        
        assert local == {'tags': ['a'], 'nested': {'x': [1]}}
        assert remote == {'tags': ['b'], 'nested': {'x': [2]}}
