"""Generator layer — declaration parsing, planning, and source emission.

Parsing (``parser``, ``loaders``) produces a :class:`DeclarationSet`;
planning (``entity``, ``aggregate``) validates it and derives every
generated name; ``emitter`` renders the plans to Python source.
``pipeline`` wires the stages together with all-or-nothing semantics.
"""
