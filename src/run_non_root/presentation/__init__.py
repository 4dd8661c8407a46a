"""Presentation layer: command line interface and console output."""
