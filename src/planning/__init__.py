"""Workspace planning and external command construction."""
