"""Custom exceptions for lyricreel."""


class LyricReelError(Exception):
    """Base exception for lyricreel."""
    pass


class ConfigError(LyricReelError):
    """Invalid configuration value or broken configuration invariant."""
    pass


class ValidationError(LyricReelError):
    """Invalid input parameters."""
    pass


class AssetLoadError(LyricReelError):
    """Image or audio asset is unreachable or cannot be decoded."""
    pass


class RenderError(LyricReelError):
    """Error rendering video."""
    pass


class EncoderError(RenderError):
    """The video encoder rejected its input or failed while muxing."""
    pass


class ExportCancelled(LyricReelError):
    """Export was cancelled by the user."""
    pass
