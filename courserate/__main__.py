"""
Package entry point.

Allows running the application via:

    python -m courserate

This simply forwards execution to courserate.cli.main().
"""

from courserate.cli import main

if __name__ == "__main__":
    main()
