"""Infrastructure layer — rule and payload file I/O.

This layer depends on stdlib and third-party parsers (ruamel.yaml).
It may build domain rule nodes but must never import from services,
commands, or output.
"""
