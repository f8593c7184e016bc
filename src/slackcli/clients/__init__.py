from .slack import SlackClient as SlackClient

__all__ = ["SlackClient"]
