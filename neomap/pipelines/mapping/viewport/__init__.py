from .fit_calculator import ViewportFitCalculator, clamp_viewport

__all__ = ["ViewportFitCalculator", "clamp_viewport"]
