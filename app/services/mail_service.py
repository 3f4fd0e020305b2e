"""Decoding of raw MIME emails forwarded to the bot."""

from dataclasses import dataclass
from email import message_from_bytes, policy
from email.message import EmailMessage
from email.utils import parseaddr

from app.core.errors import EmptyInputError
from app.core.utils import get_logger

logger = get_logger("finance-assistant.mail")


@dataclass(frozen=True)
class InboundEmail:
    """The decoded parts of an email that extraction needs."""

    sender_name: str
    sender_address: str
    subject: str
    date: str
    text: str
    html: str

    @property
    def body(self) -> str:
        """Plain text body, falling back to HTML."""
        return self.text or self.html

    def to_payload(self) -> str:
        """Build the text sent to the transaction extractor."""
        return f"Email date: {self.date}\nEmail sender: {self.sender_name}\nEmail content:\n{self.body}"


def _part_content(message: EmailMessage, subtype: str) -> str:
    part = message.get_body(preferencelist=(subtype,))
    if part is None or part.get_content_subtype() != subtype:
        return ""
    try:
        content = part.get_content()
    except LookupError:
        logger.warning(f"📬 Unknown charset {part.get_content_charset()!r}, decoding the {subtype} part as UTF-8")
        content = part.get_payload(decode=True).decode("utf-8", "replace")
    return content.strip()


def parse_email(raw: bytes) -> InboundEmail:
    """Decode a raw MIME message; raise ``EmptyInputError`` when it has neither text nor HTML body."""
    message = message_from_bytes(raw, policy=policy.default)
    name, address = parseaddr(str(message.get("From", "")))
    email = InboundEmail(
        sender_name=name or address,
        sender_address=address,
        subject=str(message.get("Subject", "")),
        date=str(message.get("Date", "")),
        text=_part_content(message, "plain"),
        html=_part_content(message, "html"),
    )
    logger.info(f"📬 New mail arrived! Sender {email.sender_name} ({email.sender_address}), subject: {email.subject}")
    if not email.body:
        msg = "📬 Email content is empty"
        logger.error(msg)
        raise EmptyInputError(msg)
    return email
