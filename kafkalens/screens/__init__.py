"""Screens for the KafkaLens TUI."""
