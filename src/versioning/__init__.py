"""Manifest/lock models, parsing and version reconciliation."""
