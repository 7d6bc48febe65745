"""Playback timeline, segment index, gapless stitching, clip export and live-grid logic for a camera viewer."""

__version__ = "1.0.0"