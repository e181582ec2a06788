"""Shared kernel: enums, telemetry, utilities."""
