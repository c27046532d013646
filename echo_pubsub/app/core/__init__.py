"""Process-wide values shared by every module."""
SERVICE_NAME = "echo-pubsub"
