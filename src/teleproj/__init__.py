"""teleproj - Bookmark project directories and jump to them by index or name."""

__version__ = "0.1.0"

from teleproj.config import TeleprojConfig

__all__ = ["TeleprojConfig", "__version__"]
