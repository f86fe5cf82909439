"""Software scanline renderer with lighting, texturing and antialiasing."""

__version__ = "0.1.0"
__all__ = ["gz", "transforms", "texture", "shading", "triangle", "renderer", "application"]