"""HTTP API surface: shared dependencies, the response envelope and routers."""
