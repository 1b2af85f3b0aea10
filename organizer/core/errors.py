class InvalidInputError(ValueError):
    """Raised when embeddings or organization parameters are unusable."""
