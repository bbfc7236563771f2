"""HTTP transport: FastAPI app and gateway auth."""
