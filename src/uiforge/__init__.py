"""
uiforge - prompt-driven UI generation playground.
Fans a prompt out to Gemini models and reconciles results into a shared feed.
"""

__version__ = "0.1.0"
