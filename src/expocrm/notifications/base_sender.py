"""
Base Sender

Abstract interface for outbound message delivery.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class SendResult:
    """Result of a send attempt"""
    success: bool
    error: Optional[str] = None


class BaseSender(ABC):
    """Abstract outbound sender"""

    @property
    @abstractmethod
    def configured(self) -> bool:
        """True when the sender has everything it needs to deliver"""
        ...

    @abstractmethod
    async def send(self, recipient: dict, subject: str, body: str) -> SendResult:
        """
        Deliver a message.

        Args:
            recipient: {"email": ..., "name": ...}
            subject: Message subject
            body: Plain text body
        Returns:
            SendResult with success flag and optional error message
        """
        ...
