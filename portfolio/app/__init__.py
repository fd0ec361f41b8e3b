"""FastAPI application for the portfolio builder."""
