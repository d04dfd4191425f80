"""Use cases orchestrating the domain and the adapters."""
