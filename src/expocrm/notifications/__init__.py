"""
ExpoCRM Outbound Delivery

Senders used to deliver email drafts to contacts.
"""
from .base_sender import BaseSender, SendResult
from .email_sender import EmailSender

__all__ = [
    'BaseSender',
    'SendResult',
    'EmailSender',
]
