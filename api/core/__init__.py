"""
Shared, cross-cutting code for the API.

`core/` holds the small building blocks every feature package leans on:
DB pool, environment settings, logging setup, the error envelope and the
media host client. Feature SQL and business rules live in the feature
packages (`faculty/`, `toast/`, `media/`).
"""
