"""Domain layer: model addressing, merge rules, and transaction values.

This layer depends only on stdlib and pydantic.
It must never import from compiler, dispatch, services, infrastructure,
commands, or config.
"""
