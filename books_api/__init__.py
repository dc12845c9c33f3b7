"""In-N-Out-Books: book collection and user authentication API."""
