"""Analyzer adapters and shared plumbing (subprocess, filesystem IO)."""
