"""HTTP boundary: routers, dependencies and error mapping."""
