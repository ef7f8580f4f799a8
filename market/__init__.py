from market.engine import MarketResult, compute_market, parse_shift
from market.parser import parse_equation

__all__ = ["MarketResult", "compute_market", "parse_equation", "parse_shift"]
