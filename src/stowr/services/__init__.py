"""Service layer — generator operations returning ServiceResult.

Services may import from generator, config, and infrastructure layers.
They must never import from commands or output.
"""
