"""Estimation core: configuration, domain, interfaces and services."""
