"""Data models for the mail relay."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Tuple
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TemplateType(str, Enum):
    """HTML layouts available for messages without an explicit html body."""

    NOTIFICATION = "notification"
    TRANSACTIONAL = "transactional"


class EmailRequest(BaseModel):
    """A single send request as received from a client."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    to: str
    subject: str
    text: str
    cc: List[str] = Field(default_factory=list)
    bcc: List[str] = Field(default_factory=list)
    html: Optional[str] = None
    template_type: str = Field(TemplateType.NOTIFICATION.value, alias="templateType")
    attachments: List[Dict[str, Any]] = Field(default_factory=list)

    def recipients(self) -> List[str]:
        """Every address in to, cc and bcc order, duplicates kept."""
        return [self.to, *self.cc, *self.bcc]


@dataclass(frozen=True)
class ComposedMessage:
    """A transport-ready message. Built once by the composer, never mutated."""

    sender_name: str
    sender_address: str
    to: str
    subject: str
    text: str
    html: str
    cc: Tuple[str, ...] = ()
    bcc: Tuple[str, ...] = ()
    attachments: Tuple[Dict[str, Any], ...] = ()
    headers: Tuple[Tuple[str, str], ...] = ()
    click_tracking: bool = False
    open_tracking: bool = False

    @property
    def message_id(self) -> Optional[str]:
        return dict(self.headers).get("Message-ID")

    @property
    def envelope_recipients(self) -> List[str]:
        envelope = self.envelope()
        return [envelope["to"], *envelope.get("cc", []), *envelope.get("bcc", [])]

    def envelope(self) -> Dict[str, Any]:
        """Addressing fields, leaving out cc and bcc when they are empty."""
        envelope: Dict[str, Any] = {
            "from": {"name": self.sender_name, "address": self.sender_address},
            "to": self.to,
        }
        if self.cc:
            envelope["cc"] = list(self.cc)
        if self.bcc:
            envelope["bcc"] = list(self.bcc)
        return envelope


@dataclass
class TransportReceipt:
    """What a transport reports back after accepting a message."""

    message_id: str
    accepted: List[str] = field(default_factory=list)
    rejected: List[str] = field(default_factory=list)


@dataclass
class DeliveryResult:
    """Outcome of handing one message to the transport."""

    success: bool
    message_id: Optional[str] = None
    accepted: List[str] = field(default_factory=list)
    rejected: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def failed(cls, error: str) -> "DeliveryResult":
        return cls(success=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON response body."""
        if not self.success:
            return {"success": False, "error": self.error}
        return {
            "success": True,
            "messageId": self.message_id,
            "accepted": list(self.accepted),
            "rejected": list(self.rejected),
        }


@dataclass
class BulkEntryResult:
    """Outcome of one entry of a bulk request, keyed by its original to."""

    email: Optional[str]
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        result: Dict[str, Any] = {"email": self.email, "success": self.success}
        if self.success:
            result["messageId"] = self.message_id
        else:
            result["error"] = self.error
        return result
