"""
Pixelsorter - Contrast-masked pixel sorting for glitch art

Sorts contiguous runs of pixels along rows or columns of an image,
restricted to the pixels whose color attribute falls inside a contrast band.
"""

__version__ = "1.0.0"
__author__ = "Pixelsorter Team"
