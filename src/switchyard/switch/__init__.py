"""Switches: ordered route variants bound from captures into typed values."""
