"""Skincare advisor agent: tool-augmented, checkpointed conversations"""

__version__ = "0.1.0"
