"""Tests for the Harvest import adapter."""
