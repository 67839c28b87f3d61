"""Domain layer — runtime support imported by generated code.

This layer depends only on stdlib and pydantic.
It must never import from generator, services, infrastructure, commands, or config.
"""
