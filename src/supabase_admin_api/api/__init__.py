"""HTTP surface: FastAPI app factory, dependencies and route modules."""
