"""
Package entry point.

Allows running the application via:

    python -m classpicker

This simply forwards execution to classpicker.cli.main().
"""

from classpicker.cli import main

if __name__ == "__main__":
    main()
