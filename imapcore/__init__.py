"""IMAP building blocks: number sets, modified UTF-7, SASL base64, wire encoding and decoding, and protocol data types."""

__version__ = "0.1.0"

__all__ = [
    "decoder",
    "encoder",
    "imapnum",
    "mailbox",
    "numset",
    "parse",
    "response",
    "sasl",
    "search",
    "utf7",
    "wire",
]