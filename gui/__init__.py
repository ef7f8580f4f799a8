from gui.app import MarketSolverApp

__all__ = ["MarketSolverApp"]
