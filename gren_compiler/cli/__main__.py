"""
Entry point for running the CLI as a module.

Usage: python -m gren_compiler.cli [compiler arguments]
"""

from .main import main

if __name__ == "__main__":
    main()
