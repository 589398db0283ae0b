"""Serving layer — ASGI glue, the API dispatcher, CORS, and the request log."""
