"""HTTP middleware for the SecureYou alerts service."""
