"""Tests for lifecycle-probe."""
