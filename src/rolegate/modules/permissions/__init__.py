"""Permissions module: CRUD over the permission catalog."""
