from datetime import datetime
from typing import Optional, List
from .base import CamelModel


class GraphEmailAddress(CamelModel):
    name: Optional[str] = None
    address: Optional[str] = None


class GraphRecipient(CamelModel):
    email_address: GraphEmailAddress = GraphEmailAddress()


class GraphUser(CamelModel):
    id: Optional[str] = None
    mail: Optional[str] = None
    display_name: Optional[str] = None
    department: Optional[str] = None
    job_title: Optional[str] = None
    user_principal_name: Optional[str] = None


class GraphMessage(CamelModel):
    id: str
    conversation_id: Optional[str] = None
    subject: Optional[str] = None
    body_preview: Optional[str] = None
    received_date_time: datetime
    sender: Optional[GraphRecipient] = None
    to_recipients: List[GraphRecipient] = []
    importance: Optional[str] = None
    has_attachments: bool = False
    is_read: bool = False

    @property
    def sender_address(self) -> str:
        if self.sender and self.sender.email_address.address:
            return self.sender.email_address.address
        return ''

    @property
    def recipient_addresses(self) -> List[str]:
        return [r.email_address.address or '' for r in self.to_recipients]
