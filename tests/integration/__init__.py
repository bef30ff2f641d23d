"""Integration tests wiring Client, HttpxTransport and the retry policy."""
