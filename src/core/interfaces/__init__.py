"""Protocols the services depend on; `adapters` provides the implementations."""
