"""HTTP API for article-api."""
