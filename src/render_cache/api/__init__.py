"""HTTP API: FastAPI app factory, dependency wiring and server lifecycle."""
