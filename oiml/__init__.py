"""Open Intent Modeling Language (OIML) validation, IR lowering and template resolution."""

__version__ = "0.1.0"
