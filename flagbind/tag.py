# please leave this copyright notice in binary distributions.
license = """
flagbind/tag.py
part of the flagbind software package
Copyright 2021-2023 by Larry Hastings
All rights reserved.

Permission is hereby granted, free of charge, to any person obtaining a
copy of this software and associated documentation files (the "Software"),
to deal in the Software without restriction, including without limitation
the rights to use, copy, modify, merge, publish, distribute, sublicense,
and/or sell copies of the Software, and to permit persons to whom the
Software is furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included
in all copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT.
IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM,
DAMAGES OR OTHER LIABILITY, WHETHER IN AN ACTION OF CONTRACT,
TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE
OR THE USE OR OTHER DEALINGS IN THE SOFTWARE.
"""

##
## Field tags.
##
## A tag is a little string attached to a record field that
## says which flag the field is bound to:
##
##     ip,del=',', usage='The IP address'
##
## The first token is the flag name.  After that come
## comma-separated key=value pairs, in any order.  flagbind
## itself only looks at "del" (the delimiter for list flags)
## and "usage" (the text for the defaults listing), but any
## key is accepted and kept.
##
## Values (and the name) may be bare words or quoted strings.
## Quoted strings use ' or ", and backslash escapes the quote
## character or another backslash:
##
##     quote,usage='Field to show embedded (\') chars'
##
## Whitespace between tokens is ignored.  A key without a
## value, or a stray word, is ignored too, unless the tag is
## parsed strictly.
##

import collections
from dataclasses import dataclass, field

from big.itertools import PushbackIterator

from .errors import TagSyntaxError


TAG_KEY = "flagbind"


class Tag(str):
    """
    Marks a string in typing.Annotated metadata as a flagbind tag:

        @dataclass
        class Options:
            ips: Annotated[list[str], flagbind.Tag("ip,del=','")]
    """
    def __repr__(self):
        return f"Tag({str.__repr__(self)})"


@dataclass(frozen=True)
class TagTriple:
    name: str
    delimiter: str = ''
    usage: str = ''
    fields: dict = field(default_factory=dict, compare=False, repr=False)


TOKEN_BARE = "bare"
TOKEN_STRING = "string"
TOKEN_SYMBOL = "symbol"

Token = collections.namedtuple("Token", "type text value")

symbols = {",", "="}
quote_marks = {"'", '"'}
escape = "\\"


def tokenize(s):
    """
    Yields Tokens from s.

    text is the token exactly as it appeared in s;
    value is the decoded token: for quoted strings the
    quote marks are removed and escapes are decoded.

    Raises TagSyntaxError on an unterminated quoted string.
    """
    i = PushbackIterator(s)
    for c in i:
        if c.isspace():
            continue

        if c in symbols:
            yield Token(TOKEN_SYMBOL, c, c)
            continue

        if c in quote_marks:
            quote = c
            text = [c]
            value = []
            closed = False
            for c in i:
                text.append(c)
                if c == escape:
                    c = next(i, None)
                    if c is None:
                        break
                    text.append(c)
                    if c not in (quote, escape):
                        value.append(escape)
                    value.append(c)
                    continue
                if c == quote:
                    closed = True
                    break
                value.append(c)
            if not closed:
                raise TagSyntaxError(f"unterminated quoted string in tag {s!r}")
            yield Token(TOKEN_STRING, "".join(text), "".join(value))
            continue

        word = [c]
        for c in i:
            if c.isspace() or (c in symbols) or (c in quote_marks):
                i.push(c)
                break
            word.append(c)
        word = "".join(word)
        yield Token(TOKEN_BARE, word, word)


def _parse_tag(s, strict):
    if (not s) or s.isspace():
        return None

    tokens = tokenize(s)

    # the first token is always the flag name
    token = next(tokens, None)
    if (token is None) or (token.type == TOKEN_SYMBOL):
        return None
    name = token.value

    def malformed(message):
        if strict:
            raise TagSyntaxError(f"{message} in tag {s!r}")

    fields = {}
    expecting_key = False
    expecting_value = False
    key = None

    for token in tokens:
        if token.type == TOKEN_SYMBOL:
            if token.text == ",":
                if key is not None:
                    malformed(f"key {key!r} has no value")
                key = None
                expecting_value = False
                expecting_key = True
                continue

            # "="
            if key is None:
                raise TagSyntaxError(f"'=' without a key in tag {s!r}")
            if expecting_value:
                malformed("repeated '='")
            expecting_value = True
            continue

        if expecting_key:
            key = token.value
            expecting_key = False
            continue

        if expecting_value:
            fields[key] = token.value
            key = None
            expecting_value = False
            continue

        malformed(f"unexpected {token.text!r}")

    if key is not None:
        malformed(f"key {key!r} has no value")

    return TagTriple(
        name=name,
        delimiter=fields.get("del", ''),
        usage=fields.get("usage", ''),
        fields=fields,
        )


def parse_tag(s, *, strict=False):
    """
    Parses a field tag, returning a TagTriple, or None if
    the tag doesn't declare a flag.

    Empty tags, and tags that don't start with a name,
    always return None.  So do tags with an '=' that has
    no key before it, and tags with an unterminated quoted
    string.  Keys without values and stray tokens are
    ignored.

    If strict is true, every one of those mistakes raises
    TagSyntaxError instead (except for empty tags, and tags
    that don't start with a name).
    """
    try:
        return _parse_tag(s, strict)
    except TagSyntaxError:
        if strict:
            raise
        return None
