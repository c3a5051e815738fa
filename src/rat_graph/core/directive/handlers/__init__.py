"""Directive handlers, one module per directive type."""
