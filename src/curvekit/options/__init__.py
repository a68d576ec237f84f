"""
Options package - Black'76 pricing used for volatility bump-and-reval.
"""

from .black import black76_call, black76_put, black76_vega

__all__ = ["black76_call", "black76_put", "black76_vega"]
