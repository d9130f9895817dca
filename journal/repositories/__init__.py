"""
Repositories package for the insight engine.

Data access layer:
- base_repository: EntryStore protocol, in-memory store and raw entry loading
"""
