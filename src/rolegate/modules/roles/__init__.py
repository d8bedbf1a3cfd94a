"""Roles module: role management and role permission grants."""
