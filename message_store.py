import uuid
from datetime import datetime, timezone
from functools import lru_cache
from typing import NamedTuple

from botocore.exceptions import BotoCoreError, ClientError

from config import get_settings
from dynamo import dynamodb_resource, error_code
from errors import StoreUnavailableError

DEFAULT_SUBJECT = "Contact Form Submission"


class ContactMessage(NamedTuple):
    id: str
    name: str
    email: str
    subject: str
    message: str
    timestamp: str
    ip_address: str

    @classmethod
    def create(cls, name, email, message, subject=None, ip_address="unknown"):
        return cls(
            id=str(uuid.uuid4()),
            name=name,
            email=email,
            subject=subject or DEFAULT_SUBJECT,
            message=message,
            timestamp=datetime.now(timezone.utc).isoformat(),
            ip_address=ip_address,
        )

    def as_item(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "subject": self.subject,
            "message": self.message,
            "timestamp": self.timestamp,
            "ipAddress": self.ip_address,
        }


class MessageStore:
    """Append-only collection of contact messages."""

    def __init__(self, table):
        self.table = table

    def add(self, message: ContactMessage):
        try:
            self.table.put_item(
                Item=message.as_item(),
                ConditionExpression="attribute_not_exists(#id)",
                ExpressionAttributeNames={"#id": "id"},
            )
        except ClientError as exc:
            raise StoreUnavailableError(
                f"Saving contact message failed: {error_code(exc)}"
            ) from exc
        except BotoCoreError as exc:
            raise StoreUnavailableError(f"Saving contact message failed: {exc}") from exc
        return message


@lru_cache(maxsize=None)
def get_message_store() -> MessageStore:
    settings = get_settings()
    try:
        table = dynamodb_resource(settings).Table(settings.messages_table_name)
    except BotoCoreError as exc:
        raise StoreUnavailableError(f"Cannot reach DynamoDB: {exc}") from exc
    return MessageStore(table)
