"""
Entry point for running the crossrs-toolchain CLI as a module.

Usage: python -m crossrs_toolchain.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
