"""Importable test data: canned API responses and sample payloads."""
