"""Labeled logging and the rejected-file error log."""
