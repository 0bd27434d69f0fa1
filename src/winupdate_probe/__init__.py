"""winupdate-probe - Windows Update posture probe for Opsview."""

__version__ = "1.0.0"
