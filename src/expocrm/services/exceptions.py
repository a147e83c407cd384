"""
Service Exceptions

Errors raised by services and translated to HTTP responses by the routes.
"""


class NotFoundError(Exception):
    """Requested entity does not exist"""

    def __init__(self, entity: str, entity_id=None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class AIServiceError(Exception):
    """LLM call failed or returned unusable output"""


class NoContactDataError(Exception):
    """A capture carries no usable contact fields"""


class EmailDeliveryError(Exception):
    """The SMTP server rejected or could not take a message"""
