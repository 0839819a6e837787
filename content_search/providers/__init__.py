"""Ready-made content providers."""

from .jcr import ContentKey, JcrContentProvider, extract_content

__all__ = ["ContentKey", "JcrContentProvider", "extract_content"]
