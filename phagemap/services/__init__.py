"""Batch import, upload boundary and parsing pipeline services."""
