"""Test helpers for DocVeil."""
