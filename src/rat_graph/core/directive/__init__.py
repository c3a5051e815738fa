"""Directives embedded in node content as ``<rat TYPE key=value/>``."""
