"""Utility stages (util.* namespace)."""
