"""Fetch pipeline components: loading, selection, verification, caching."""
