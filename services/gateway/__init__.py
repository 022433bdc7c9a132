"""Document gateway service."""
