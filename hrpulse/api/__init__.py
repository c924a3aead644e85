"""HTTP layer: application factory, dependencies and middleware."""
