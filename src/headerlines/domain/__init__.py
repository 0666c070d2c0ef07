"""Domain layer — tags, field plans, scalar rules, and errors.

This layer depends only on stdlib and pydantic.
It must never import from the encoder or config packages.
"""
