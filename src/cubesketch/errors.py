"""Exceptions raised by the cube sketch analyzer."""


class ShapeError(ValueError):
    """Request does not have the shape the analysis needs."""

    def __init__(self, problems):
        self.problems = list(problems)
        super().__init__("; ".join(self.problems))


class EncodingError(IOError):
    """Overlay image could not be encoded."""
