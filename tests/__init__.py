"""Tests for gren-compiler-library."""
