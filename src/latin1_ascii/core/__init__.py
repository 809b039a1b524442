"""Converter core: tables, buffers, scanner, mode controller."""
