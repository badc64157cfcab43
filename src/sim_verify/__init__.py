"""Simple Code file verifier."""
