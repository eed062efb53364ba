"""Todo list manager with a natural-language agent front-end."""
__version__ = "0.1.0"
