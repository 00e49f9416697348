"""Service layer — the validation engine and file-level checks.

Services may import from domain and infrastructure layers.
They must never import from commands or output.
"""
