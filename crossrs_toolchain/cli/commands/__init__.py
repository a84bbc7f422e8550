"""Command implementations for the crossrs-toolchain CLI."""
