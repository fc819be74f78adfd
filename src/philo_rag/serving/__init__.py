"""
Serving: FastAPI application exposing chunk preview, upload and feedback.
"""
