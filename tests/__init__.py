"""Tests for capability-tracker."""
