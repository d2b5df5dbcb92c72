"""Concrete schema types."""
