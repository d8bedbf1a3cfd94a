"""rolegate - role-based access control backend."""

__version__ = "0.1.0"
