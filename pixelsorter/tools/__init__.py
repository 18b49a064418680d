"""
Pixelsorter Tools - Command-line utilities.

This module provides CLI tools for:
- Sorting every image of a directory (pixelsort)
"""
