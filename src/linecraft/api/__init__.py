"""Linecraft - FastAPI REST API layer.

This package exposes the prompt refinement engine over HTTP.

Modules
-------
main
    FastAPI application with the route handlers and the ``main()`` CLI
    entry point.
models
    Pydantic models for API request validation.
"""
