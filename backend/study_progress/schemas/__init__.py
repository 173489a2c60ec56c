"""Read view schemas."""
