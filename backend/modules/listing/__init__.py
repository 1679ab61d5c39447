"""Paginated, searchable list pages with mutations.

This module provides:
- Query state with debounced search and page bounds
- Fetch coordination that discards superseded responses
- Mutation dispatch with confirmation arming
- Row normalizers for every backend record shape
"""
