"""Shopping List Server — passwordless, invitation-gated shared shopping lists."""

__version__ = "1.0.0"
