"""Datasets shipped with the application and served when nothing else is available."""
