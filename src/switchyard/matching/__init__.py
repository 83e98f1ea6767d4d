"""Matching: compiled matchers and the capture engine that runs them."""
