"""Plug-cycle test bench toolkit: serial links, SNMP v1 requests, INI settings and result tables."""

__version__ = "0.1.0"