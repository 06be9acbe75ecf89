class PinHighError(Exception):
    """Base exception for simulator input errors."""


class HoleGeometryError(PinHighError):
    """Raised when a hole is described without the regions play requires."""


class SkillProfileError(PinHighError):
    """Raised when a skill level cannot be parsed."""


class BenchmarkTableError(PinHighError):
    """Raised when benchmark rows stop getting worse with tier."""
