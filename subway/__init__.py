"""Subway line topology service."""
