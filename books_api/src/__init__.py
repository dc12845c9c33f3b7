"""FastAPI service for the In-N-Out-Books collection.

This package provides REST API endpoints for managing books and checking
user credentials and security answers.
"""

__version__ = "1.0.0"
