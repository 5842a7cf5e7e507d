"""Sketchsynth - turn UI sketches and text into HTML, answers and diagrams."""

__version__ = "0.3.0"
