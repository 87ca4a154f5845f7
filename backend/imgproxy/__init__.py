"""On-demand image resizing proxy with memory and disk caching."""

__version__ = "1.0.0"
