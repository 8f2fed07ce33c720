"""Core logic for indicators, signals, safety checks and paper trading.

This package contains pure business logic with no I/O dependencies
(no network, files, or persistence). The app/ package wires it to
configuration, quote sources and reporting.
"""
