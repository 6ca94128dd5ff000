"""HTTP API package: FastAPI app (app.py) and its pydantic schemas (models.py)."""
