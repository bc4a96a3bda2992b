"""KafkaLens - terminal inspector for Kafka topics."""

__version__ = "0.1.0"
