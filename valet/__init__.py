"""Valet: JSON Schema generator for Helm values files."""
