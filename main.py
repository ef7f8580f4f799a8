"""
MarketSolver — Entry point.

Launch the Tkinter supply & demand calculator.
"""

from gui import MarketSolverApp


def main() -> None:
    app = MarketSolverApp()
    app.mainloop()


if __name__ == "__main__":
    main()
