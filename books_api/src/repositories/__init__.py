"""In-memory stores for books and users."""
