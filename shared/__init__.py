"""Logging and metrics helpers shared by the API service."""
