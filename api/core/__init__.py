"""
Shared, cross-cutting code for the API.

`core/` holds small building blocks the feature packages use
(DB pool wiring, settings, logging). Recipe-specific SQL and business logic
live in `recipes/`.
"""
