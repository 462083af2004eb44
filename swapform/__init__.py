"""Two-field token swap form engine with a simulated settlement."""

__version__ = "0.1.0"
