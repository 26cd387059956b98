"""ImagePro backend - retention of processed image uploads."""

__version__ = "0.1.0"
