"""Catalog, gamepad, settings and window collaborators around the launcher core."""
