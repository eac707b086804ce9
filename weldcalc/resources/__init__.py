"""Packaged data files (default grade table)."""
