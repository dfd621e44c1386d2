"""tokenscope - token efficiency and LLM reliability analysis."""

from tokenscope.__version__ import __version__


__all__ = ['__version__']
