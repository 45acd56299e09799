"""Utility functions for ragstore."""

from ragstore.utils.binary import decode_text, detect_binary, is_binary_content, is_binary_extension

__all__ = ["decode_text", "detect_binary", "is_binary_content", "is_binary_extension"]
