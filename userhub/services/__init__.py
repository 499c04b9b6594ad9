"""
Use cases for the userhub API.

Each service module orchestrates repositories inside a single unit of work
to implement the business rules (uniqueness, cascades, presence).

Routers call these services instead of touching sessions or repositories
directly.
"""
