"""Domain layer: node records, identifier rules and the query language.

This layer depends only on stdlib, pydantic, and pyparsing.
It must never import from services, infrastructure, commands, or config.
"""
