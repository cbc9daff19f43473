"""CLI module for cwdclient."""
