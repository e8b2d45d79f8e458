"""Scan orchestration: config, driver state machine, summarization, wiring."""
