# errors.py


class CompositeError(RuntimeError):
    """Any failure while building a composited image."""


class ConfigurationError(CompositeError):
    """Template name has no registry entry, or its face slot is unusable."""


class DownloadError(CompositeError):
    """The AI-generated source image could not be fetched."""


class CodecError(CompositeError):
    """Image bytes could not be decoded, resized or encoded."""


class PersonalizationError(RuntimeError):
    """Upload rejected, or one of the pipeline steps failed."""
