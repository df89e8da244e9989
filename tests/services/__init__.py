"""Sample service classes used across the test suite."""
