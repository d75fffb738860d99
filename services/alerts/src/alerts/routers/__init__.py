"""HTTP routers for the SecureYou alerts service."""
