"""
Entry point for running crossrs-toolchain CLI as a module.

Usage: python -m crossrs_toolchain [command] [options]
"""

from crossrs_toolchain.cli.parser import main

if __name__ == "__main__":
    main()
