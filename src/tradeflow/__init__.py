"""
Tradeflow - dependency-gated trading checklist

Tradeflow models a trading-process workflow as a checklist whose steps can
only be marked complete once their prerequisite steps are complete.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
