"""
Recipe feature package: JSON ingestion, search predicates, persistence and
the `/api/recipes` routes.
"""
