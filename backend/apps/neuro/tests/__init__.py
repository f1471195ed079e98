"""
Tests for the neuro app.

This package contains tests for:
- Activation functions
- Network forward pass and parameter operators
- Population, ranking and champion selection
- Parallel scheduling
- The generational trainer and its configuration
- Environments and the train_daemon command
"""
