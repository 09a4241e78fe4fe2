# imapcore

Building blocks for IMAP clients and servers, using only the standard library:

- **Number sets** (`imapcore.imapnum`, `imapcore.numset`): parse, merge and format
  sequence sets such as `1:3,5,7:*`; typed `SeqSet` and `UIDSet`, and the
  `search_res()` marker that is written as `$`.
- **Modified UTF-7** (`imapcore.utf7`): encode and decode mailbox names.
- **SASL helpers** (`imapcore.sasl`): base64 with the `=` empty-payload marker.
- **Wire protocol** (`imapcore.wire`, `imapcore.encoder`, `imapcore.decoder`,
  `imapcore.parse`): write and read atoms, quoted strings, literals, lists,
  numbers, number sets, mailbox names, flags, mailbox attributes and dates.
- **Protocol data types** (`imapcore.search`, `imapcore.response`, `imapcore.mailbox`):
  search options, criteria and results; status responses and `IMAPError`;
  LIST, NAMESPACE, SELECT, STATUS and STORE options and data.

## Installation

```
pip install imapcore
```

## Examples

Number sets:

```python
from imapcore.imapnum import parse_set

s = parse_set("5:8,6,7:10,15,16,17,18:20,19,21:*")
print(str(s))          # 5:10,15:*
print(s.contains(12))  # False
print(s.dynamic())     # True
```

Malformed input raises `imapcore.imapnum.BadNumSetError` (a `ValueError`).

Sequence sets and UID sets:

```python
from imapcore.numset import seq_set_num, search_res, is_search_res

seqs = seq_set_num(1, 2, 3, 7)
print(str(seqs))    # 1:3,7
print(seqs.nums())  # [1, 2, 3, 7]

print(is_search_res(search_res()))  # True
print(str(search_res()))            # $
```

`nums()` raises `ValueError` for a set holding `*` or `n:*`.

Modified UTF-7 mailbox names:

```python
from imapcore import utf7

print(utf7.encode("~peter/mail/台北/日本語"))  # ~peter/mail/&U,BTFw-/&ZeVnLIqe-
print(utf7.decode("&Jjo-!"))                   # ☺!
```

Invalid input raises `utf7.InvalidUTF7Error`.

SASL payloads:

```python
from imapcore.sasl import encode_sasl, decode_sasl

print(encode_sasl(b""))     # =
print(decode_sasl("aGk="))  # b'hi'
```

Writing a command line:

```python
import io
from imapcore.encoder import Encoder
from imapcore.wire import ConnSide

buf = io.BytesIO()
enc = Encoder(buf, ConnSide.CLIENT)
enc.atom("A1").sp().atom("SELECT").sp().mailbox("INBOX").crlf()
print(buf.getvalue())  # b'A1 SELECT INBOX\r\n'
```

Encoder methods return the encoder for chaining and keep the first error,
which `crlf()` raises. On the client side, a string that cannot be quoted is
sent as a literal: synchronizing literals need a `new_continuation_request`
callable, unless `literal_plus` (or `literal_minus`, for payloads up to 4096
bytes) is set.

Reading a response:

```python
import io
from imapcore.decoder import Decoder
from imapcore.parse import expect_flag_list
from imapcore.wire import ConnSide

dec = Decoder(io.BytesIO(b"* FLAGS (\\Seen \\Answered)\r\n"), ConnSide.CLIENT)
dec.expect_special("*")
dec.expect_sp()
print(dec.expect_atom())      # FLAGS
dec.expect_sp()
print(expect_flag_list(dec))  # ['\\Seen', '\\Answered']
dec.expect_crlf()
```

Methods named after grammar elements return the element or `None` (or
`False`); the `expect_*` methods raise `DecoderExpectError` instead, and
running out of input raises `EOFError`.

Status response errors:

```python
from imapcore.response import IMAPError, StatusResponseType, ResponseCode

err = IMAPError(StatusResponseType.NO, ResponseCode.TRY_CREATE, "Mailbox missing")
print(err)  # imap: NO [TRYCREATE] Mailbox missing
```

## What this package does not do

It has no client or server: it opens no connections, sends no commands and
handles no sessions or authentication exchanges. It does not parse or write
whole command or response lines such as FETCH, body structures or envelopes;
it provides the pieces from which such code is built.

## Running the tests

```
pip install -e ".[test]"
pytest
```