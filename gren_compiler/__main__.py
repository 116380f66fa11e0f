"""
Entry point for running the Gren compiler as a module.

Usage: python -m gren_compiler [compiler arguments]
"""

from gren_compiler.cli.main import main

if __name__ == "__main__":
    main()
