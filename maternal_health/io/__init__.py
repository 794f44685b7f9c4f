"""Filesystem helpers: project paths and table/summary export."""
