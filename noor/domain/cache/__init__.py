"""
Cache Domain

Value objects, payload entities, validation policy and repository interfaces
of the offline cache.
"""
