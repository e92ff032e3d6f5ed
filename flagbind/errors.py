# please leave this copyright notice in binary distributions.
license = """
flagbind/errors.py
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


class FlagbindBaseException(Exception):
    pass


class ConfigurationError(FlagbindBaseException):
    """
    Raised when the flagbind API is used improperly.

    These are programmer mistakes, and they're always
    detected at registration time, before any parsing.

    If the error was raised while binding a field of a
    record, "field" is the name of that field.
    """
    field = None

class UnsupportedTypeError(ConfigurationError):
    """
    Raised when a destination's type isn't one flagbind
    knows how to bind.
    """
    pass

class DuplicateFlagError(ConfigurationError):
    """
    Raised when a flag name is registered twice
    in the same flag set.
    """
    pass

class NotAStructError(ConfigurationError):
    """
    Raised when bind_struct() is passed something that
    doesn't have annotated fields.
    """
    pass

class NotAReferenceError(ConfigurationError):
    """
    Raised when a destination isn't something flagbind
    can write into: a Reference for bind(), or an
    *instance* (not a class) for bind_struct().
    """
    pass

class TagSyntaxError(ConfigurationError):
    """
    Raised by strict tag parsing when a field's tag
    looks like a flag declaration but is malformed.
    """
    pass


class UsageError(FlagbindBaseException):
    """
    Raised when flagbind processes an invalid command-line.
    """
    pass

class HelpRequested(UsageError):
    """
    Raised when -h or -help is on the command-line
    but no flag with that name was defined.
    """
    pass


class ConversionError(FlagbindBaseException, ValueError):
    """
    Raised when a string from the command-line can't be
    converted to the type of its destination.

        kind is the flagbind.values.Kind we were converting to.
        text is the offending string.
        reason is either "parse error" or "value out of range".
    """
    def __init__(self, kind, text, reason="parse error"):
        self.kind = kind
        self.text = text
        self.reason = reason
        super().__init__(reason)
