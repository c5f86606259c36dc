"""HTTP proxy API."""
