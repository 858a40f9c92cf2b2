"""Adapters binding domain ports to concrete services."""
