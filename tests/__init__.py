"""Test suite for the file conversion engine."""
