"""User directory bounded context.

Owns directory user records (lookup, creation, partial updates, removal)
and the chat-driven API key issuance workflow built on top of them.
"""
