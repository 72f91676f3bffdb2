"""
Customer-support chat for the storefront backend.

Persisted chat rooms and messages ('storefront_chat.chat_database'), in-memory
presence and live message routing ('storefront_chat.realtime'), and the
FastAPI surface in front of both ('storefront_chat.api').
"""

__version__ = "0.1.0"
