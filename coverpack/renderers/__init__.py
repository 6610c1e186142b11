"""Renderers that turn cell, table and header/footer configs into layout blocks."""
