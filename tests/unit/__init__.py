"""Unit tests for the OLP client."""
