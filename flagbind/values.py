# please leave this copyright notice in binary distributions.
license = """
flagbind/values.py
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

from abc import abstractmethod, ABCMeta
import enum
import math
import re
import typing

from .errors import ConversionError, UnsupportedTypeError


AnnotatedType = type(typing.Annotated[int, str])

def dereference_annotated(annotation):
    if isinstance(annotation, AnnotatedType):
        return annotation.__origin__
    return annotation


class Kind(enum.Enum):
    """
    The closed set of scalar types flagbind can bind.

    A destination is either one of these, or a list
    of one of these (except BOOL, which can't be a list).
    """
    INT = "int"
    INT32 = "int32"
    INT64 = "int64"
    UINT = "uint"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT64 = "float64"
    STRING = "string"
    BOOL = "bool"

    def __repr__(self):
        return f"<Kind.{self.name}>"


##
## Python only has one int and one float.  These markers
## let you say which width you meant, in annotations or
## in a Var:
##
##     port: flagbind.uint32 = 8080
##     offsets = flagbind.Var(list[flagbind.int64])
##
## They're NewTypes, so at runtime calling one is a no-op.
##
int32 = typing.NewType('int32', int)
int64 = typing.NewType('int64', int)
uint = typing.NewType('uint', int)
uint32 = typing.NewType('uint32', int)
uint64 = typing.NewType('uint64', int)
float64 = typing.NewType('float64', float)


annotation_to_kind = {
    int: Kind.INT,
    int32: Kind.INT32,
    int64: Kind.INT64,
    uint: Kind.UINT,
    uint32: Kind.UINT32,
    uint64: Kind.UINT64,
    float: Kind.FLOAT64,
    float64: Kind.FLOAT64,
    str: Kind.STRING,
    bool: Kind.BOOL,
    }

for _kind in Kind:
    annotation_to_kind[_kind] = _kind
del _kind


def _lookup_kind(annotation):
    try:
        return annotation_to_kind.get(annotation)
    except TypeError:
        # unhashable annotation
        return None

def _annotation_name(annotation):
    if isinstance(annotation, Kind):
        return annotation.value
    return getattr(annotation, '__name__', None) or repr(annotation)


sequence_origins = {list}

def resolve_annotation(annotation):
    """
    Maps a destination's annotation to (kind, is_sequence).

    Scalars are the keys of annotation_to_kind; sequences are
    list[T] (or typing.List[T]) where T is a scalar other than
    bool.  Anything else raises UnsupportedTypeError.
    """
    annotation = dereference_annotated(annotation)
    kind = _lookup_kind(annotation)
    if kind:
        return kind, False

    origin = typing.get_origin(annotation)
    if origin not in sequence_origins:
        raise UnsupportedTypeError(f"unsupported type {_annotation_name(annotation)}")

    element_types = typing.get_args(annotation)
    if len(element_types) != 1:
        raise UnsupportedTypeError(f"unsupported type {annotation!r}, lists must say what they contain")
    element = dereference_annotated(element_types[0])
    kind = _lookup_kind(element)
    if (not kind) or (kind == Kind.BOOL):
        raise UnsupportedTypeError(f"unsupported list type {annotation!r}, can't have a list of {_annotation_name(element)}")
    return kind, True


##
## converters
##
## One per Kind.  Each takes the string from the command-line
## and returns the value, or raises ConversionError.
##
## The integer and float syntax is narrower than int() and
## float(): ASCII only, no surrounding whitespace, underscores
## only after a base prefix.
##

_prefixed_integer_re = re.compile(r'0[xXbBoO][0-9A-Fa-f_]+\Z')
_octal_integer_re = re.compile(r'0[0-7_]+\Z')
_decimal_integer_re = re.compile(r"(?:0|[1-9][0-9]*)\Z")

def _parse_integer(kind, text, bits, signed):
    s = text
    negative = False
    if signed and s[:1] in ('+', '-'):
        negative = s[0] == '-'
        s = s[1:]

    if _prefixed_integer_re.match(s):
        base = 0
    elif _octal_integer_re.match(s):
        base = 8
    elif _decimal_integer_re.match(s):
        base = 10
    else:
        raise ConversionError(kind, text)

    try:
        value = int(s, base)
    except ValueError:
        raise ConversionError(kind, text) from None

    if negative:
        value = -value

    if signed:
        limit = 1 << (bits - 1)
        in_range = -limit <= value < limit
    else:
        in_range = 0 <= value < (1 << bits)
    if not in_range:
        raise ConversionError(kind, text, "value out of range")
    return value


def parse_int(text):
    return _parse_integer(Kind.INT, text, 64, True)

def parse_int32(text):
    return _parse_integer(Kind.INT32, text, 32, True)

def parse_int64(text):
    return _parse_integer(Kind.INT64, text, 64, True)

def parse_uint(text):
    return _parse_integer(Kind.UINT, text, 64, False)

def parse_uint32(text):
    return _parse_integer(Kind.UINT32, text, 32, False)

def parse_uint64(text):
    return _parse_integer(Kind.UINT64, text, 64, False)


_decimal_float_re = re.compile(r'[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?\Z')
_hex_float_re = re.compile(r'[+-]?0[xX](?:[0-9A-Fa-f_]+\.?[0-9A-Fa-f_]*|\.[0-9A-Fa-f_]+)[pP][+-]?[0-9]+\Z')
_infinity_re = re.compile(r'[+-]?(?:inf|infinity)\Z', re.IGNORECASE)
_nan_re = re.compile(r'nan\Z', re.IGNORECASE)

def parse_float64(text):
    if _infinity_re.match(text) or _nan_re.match(text):
        return float(text)

    s = text
    if _decimal_float_re.match(s):
        parse = float
    elif _hex_float_re.match(s):
        parse = float.fromhex
        s = s.replace('_', '')
    else:
        raise ConversionError(Kind.FLOAT64, text)

    try:
        value = parse(s)
    except OverflowError:
        raise ConversionError(Kind.FLOAT64, text, "value out of range") from None
    except ValueError:
        raise ConversionError(Kind.FLOAT64, text) from None

    if math.isinf(value):
        raise ConversionError(Kind.FLOAT64, text, "value out of range")
    return value


def parse_string(text):
    return text


true_strings = {"1", "t", "T", "TRUE", "true", "True"}
false_strings = {"0", "f", "F", "FALSE", "false", "False"}

def parse_bool(text):
    if text in true_strings:
        return True
    if text in false_strings:
        return False
    raise ConversionError(Kind.BOOL, text)


converters = {
    Kind.INT: parse_int,
    Kind.INT32: parse_int32,
    Kind.INT64: parse_int64,
    Kind.UINT: parse_uint,
    Kind.UINT32: parse_uint32,
    Kind.UINT64: parse_uint64,
    Kind.FLOAT64: parse_float64,
    Kind.STRING: parse_string,
    Kind.BOOL: parse_bool,
    }

zero_values = {
    Kind.INT: 0,
    Kind.INT32: 0,
    Kind.INT64: 0,
    Kind.UINT: 0,
    Kind.UINT32: 0,
    Kind.UINT64: 0,
    Kind.FLOAT64: 0.0,
    Kind.STRING: '',
    Kind.BOOL: False,
    }

# the word shown after the flag name in the defaults listing
usage_type_names = {
    Kind.INT: "int",
    Kind.INT32: "int",
    Kind.INT64: "int",
    Kind.UINT: "uint",
    Kind.UINT32: "uint",
    Kind.UINT64: "uint",
    Kind.FLOAT64: "float",
    Kind.STRING: "string",
    Kind.BOOL: "",
    }

assert set(converters) == set(Kind), "every Kind needs a converter"
assert set(zero_values) == set(Kind), "every Kind needs a zero value"
assert set(usage_type_names) == set(Kind), "every Kind needs a usage type name"


def format_float(value):
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    s = repr(value)
    if s.endswith(".0"):
        s = s[:-2]
    return s

def format_value(kind, value):
    """
    Renders a value the way it would be written on the
    command-line.
    """
    if value is None:
        value = zero_values[kind]
    if kind == Kind.BOOL:
        return "true" if value else "false"
    if kind == Kind.FLOAT64:
        return format_float(value)
    return str(value)


class Value(metaclass=ABCMeta):
    """
    Something a flag can store its argument into.

    set() is called once per occurrence of the flag on the
    command-line, with the raw string.  It should raise
    ValueError (ideally ConversionError) if the string is bad.

    get() returns the current value, and str() renders it for
    the defaults listing.

    If is_bool_flag is true, the flag doesn't consume a separate
    argument; "-flag" alone calls set("true").
    """
    is_bool_flag = False
    usage_type_name = "value"
    quote_default = False
    zero_text = ""

    @abstractmethod
    def set(self, text):
        pass

    @abstractmethod
    def get(self):
        pass

    @abstractmethod
    def __str__(self):
        pass


class ScalarValue(Value):
    """
    Converts each occurrence and writes it straight into
    reference.  The last occurrence wins; if the flag never
    appears, reference is never touched.
    """
    def __init__(self, kind, reference):
        self.kind = kind
        self.reference = reference
        self.convert = converters[kind]
        self.is_bool_flag = kind == Kind.BOOL
        self.usage_type_name = usage_type_names[kind]
        self.quote_default = kind == Kind.STRING
        self.zero_text = format_value(kind, zero_values[kind])

    def __repr__(self):
        return f"<ScalarValue {self.kind.value} {self.reference!r}>"

    def set(self, text):
        self.reference.set(self.convert(text))

    def get(self):
        return self.reference.get()

    def __str__(self):
        return format_value(self.kind, self.reference.get())


_multiarg_classes = {}

class MultiArgMeta(ABCMeta):
    """
    MultiArg[t] returns the MultiArg subclass for t, which
    may be anything resolve_annotation() maps to a non-bool Kind:
    MultiArg[int], MultiArg[flagbind.uint64], MultiArg[Kind.FLOAT64].
    """
    def __getitem__(cls, t):
        kind = _lookup_kind(dereference_annotated(t))
        if (not kind) or (kind == Kind.BOOL):
            raise UnsupportedTypeError(f"unsupported list type, can't have a list of {_annotation_name(t)}")

        subclass = _multiarg_classes.get(kind)
        if subclass is not None:
            return subclass

        class accumulator(cls):
            pass
        accumulator.kind = kind
        accumulator.__name__ = accumulator.__qualname__ = f'{cls.__name__}[{kind.value}]'
        _multiarg_classes[kind] = accumulator
        return accumulator

    def __repr__(cls):
        return f'<{cls.__name__}>'


class MultiArg(Value, metaclass=MultiArgMeta):
    """
    An accumulator for flags that can be specified more than once.

    Every call to set() appends.  If delimiter is a non-empty
    string, each occurrence is first split on it, so

        -ip 10.0.0.1 -ip 10.0.0.2,10.0.0.3

    with delimiter "," accumulates three values, in order.

    Each occurrence is all-or-nothing: if any piece fails to
    convert, nothing from that occurrence is appended.

    MultiArg by itself accumulates strings; MultiArg[t]
    accumulates values of type t.
    """
    kind = Kind.STRING
    zero_text = "[]"

    def __init__(self, delimiter=''):
        self.delimiter = delimiter or ''
        self.values = []

    def __repr__(self):
        return f"<{self.__class__.__name__} delimiter={self.delimiter!r} values={self.values!r}>"

    def set(self, text):
        if self.delimiter:
            pieces = text.split(self.delimiter)
        else:
            pieces = [text]
        convert = converters[self.kind]
        converted = [convert(piece) for piece in pieces]
        self.values.extend(converted)

    def get(self):
        return self.values

    def snapshot(self):
        return list(self.values)

    def __str__(self):
        return "[" + " ".join(format_value(self.kind, v) for v in self.values) + "]"


MultiArgInt = MultiArg[int]
MultiArgInt32 = MultiArg[int32]
MultiArgInt64 = MultiArg[int64]
MultiArgUint = MultiArg[uint]
MultiArgUint32 = MultiArg[uint32]
MultiArgUint64 = MultiArg[uint64]
MultiArgFloat64 = MultiArg[float]
MultiArgString = MultiArg[str]
