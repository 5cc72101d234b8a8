"""
Infrastructure Module

Concrete adapters: the PronounDB HTTP transport and override persistence backends.
"""
