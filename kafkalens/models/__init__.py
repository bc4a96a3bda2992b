"""Data models for KafkaLens."""
