"""Entry point for running the plotter from a checkout."""

from zenplotter.app import main


if __name__ == "__main__":
    main()
