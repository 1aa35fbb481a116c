"""stencil -- a scaffolding engine for ``{{placeholder}}`` templates."""

__version__ = "0.1.0"
