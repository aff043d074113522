"""Convert animated GIFs into spritesheets with a JSON frame atlas."""

__version__ = "0.1.0"
