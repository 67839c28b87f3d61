"""Infrastructure layer — reference repository adapter, template loading.

This layer depends on stdlib, the domain runtime, and third-party libs (Jinja2).
It must never import from generator, services, commands, or output.
"""
