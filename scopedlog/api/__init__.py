"""API layer: FastAPI/Starlette integration."""
