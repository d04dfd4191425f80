"""Concrete adapters: provider clients, cache, catalog, HTTP."""
