"""Application-wide constants."""

PROJECT_NAME = "ADHD Todo"
API_V1_STR = "/api/v1"
VERSION = "1.0.0"
