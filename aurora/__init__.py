"""AuroraREADME: assemble project READMEs from model-generated sections."""

__version__ = "0.1.0"

__all__ = ["__version__"]
