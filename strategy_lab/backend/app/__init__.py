"""FastAPI application for the Strategy Lab backend."""
