"""Domain layer — field types, rule nodes, the rule DSL, and errors.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
