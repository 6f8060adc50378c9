"""
SmartSlide: text-only PPTX to PDF conversion for slide review.
"""

__version__ = "0.1.0"
