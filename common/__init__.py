"""Shared helpers for the build-support tools."""
