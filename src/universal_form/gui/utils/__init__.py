"""Shared GUI utilities for Universal Form."""
