"""A small command-line client for the Slack Web API."""

__version__ = "0.1.0"
