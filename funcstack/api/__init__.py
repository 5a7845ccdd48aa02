"""Introspection API for declared functions."""
