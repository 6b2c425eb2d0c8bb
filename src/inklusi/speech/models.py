class SynthesisError(Exception):
    """Raised when speech cannot be synthesized for a text."""
