"""API routers for books and authentication."""
