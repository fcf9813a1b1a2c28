"""Agent Studio - a four-agent creative team driven by an LLM."""

__version__ = "1.0.0"
