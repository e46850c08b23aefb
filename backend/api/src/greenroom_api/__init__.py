"""REST API for The Green Room checkout, webhook and upload endpoints."""
