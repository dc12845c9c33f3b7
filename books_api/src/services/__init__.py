"""Business logic services.

This package contains service classes that implement business logic on
top of the repositories and provide high-level functionality to API
endpoints.
"""
