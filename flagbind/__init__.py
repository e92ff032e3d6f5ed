#!/usr/bin/env python3

"Declarative command-line flags: bind your variables and dataclass fields to flags, then parse."
__version__ = "0.6.2"


# please leave this copyright notice in binary distributions.
license = """
flagbind/__init__.py
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
import dataclasses
from os.path import basename
import sys
import typing

from .errors import (
    ConfigurationError,
    ConversionError,
    DuplicateFlagError,
    FlagbindBaseException,
    HelpRequested,
    NotAReferenceError,
    NotAStructError,
    TagSyntaxError,
    UnsupportedTypeError,
    UsageError,
    )
from .options import CONTINUE_ON_ERROR, EXIT_ON_ERROR, RAISE_ON_ERROR, ErrorHandling, Flag, OptionSet
from .tag import TAG_KEY, Tag, TagTriple, parse_tag
from .values import (
    AnnotatedType,
    Kind,
    MultiArg,
    MultiArgFloat64,
    MultiArgInt,
    MultiArgInt32,
    MultiArgInt64,
    MultiArgString,
    MultiArgUint,
    MultiArgUint32,
    MultiArgUint64,
    ScalarValue,
    Value,
    float64,
    int32,
    int64,
    resolve_annotation,
    uint,
    uint32,
    uint64,
    zero_values,
    )


##
## References
##
## A Reference is somewhere flagbind can write a value.
## It also carries the annotation that says what type
## of value belongs there; that's how bind() decides
## which converter to use.
##

class Reference(metaclass=ABCMeta):
    annotation = None

    @abstractmethod
    def get(self):
        pass

    @abstractmethod
    def set(self, value):
        pass


unspecified = object()

class Var(Reference):
    """
    A standalone box holding one value.

        port = flagbind.Var(int, 8080)
        ips = flagbind.Var(list[str])
        fs.bind(port, "port", "the port to listen on")
        ...
        print(port.value)

    If you don't supply an initial value, you get the
    zero value for the type (an empty list for lists).
    """
    def __init__(self, annotation, value=unspecified):
        self.annotation = annotation
        if value is unspecified:
            try:
                kind, is_sequence = resolve_annotation(annotation)
                value = [] if is_sequence else zero_values[kind]
            except UnsupportedTypeError:
                # bind() will complain
                value = None
        self.value = value

    def __repr__(self):
        name = getattr(self.annotation, '__name__', None) or repr(self.annotation)
        return f"<Var {name} {self.value!r}>"

    def get(self):
        return self.value

    def set(self, value):
        self.value = value


class AttributeReference(Reference):
    "Refers to attribute 'name' of object 'o'."
    def __init__(self, o, name, annotation):
        self.o = o
        self.name = name
        self.annotation = annotation

    def __repr__(self):
        return f"<AttributeReference {self.o.__class__.__name__}.{self.name}>"

    def get(self):
        return getattr(self.o, self.name, None)

    def set(self, value):
        setattr(self.o, self.name, value)


class DeferredCommit:
    """
    Copies a list flag's accumulated values into its
    destination, once the whole command-line has parsed.

    If the flag never appeared, the destination keeps
    whatever default it had.
    """
    def __init__(self, name, accumulator, reference):
        self.name = name
        self.accumulator = accumulator
        self.reference = reference

    def __repr__(self):
        return f"<DeferredCommit -{self.name} {self.reference!r}>"

    def commit(self):
        values = self.accumulator.snapshot()
        if not values:
            return False
        self.reference.set(values)
        return True


##
## FlagSet
##

class FlagSet:
    """
    A named set of flags, bound to your variables.

    bind() and bind_struct() register flags; parse()
    parses a command-line into them.  Scalar destinations
    are written as each flag is parsed.  List destinations
    are written once, after the entire command-line has
    parsed successfully; if parsing fails, they're untouched.

    error_handling says what parse() does with a bad
    command-line; see ErrorHandling.

    If strict_tags is true, bind_struct() raises TagSyntaxError
    for malformed field tags, instead of skipping the field.

    log, if specified, should be a big.Log; FlagSet logs
    binding and parsing events to it.
    """
    def __init__(self, name='', error_handling=ErrorHandling.CONTINUE_ON_ERROR, *, strict_tags=False, log=None):
        self.strict_tags = strict_tags
        self.log = log
        self.option_set = OptionSet(name, error_handling)
        self.deferred = []

    def __repr__(self):
        return f"<FlagSet {self.name!r} flags={len(self.option_set.formal)} deferred={len(self.deferred)}>"

    @property
    def name(self):
        return self.option_set.name

    @property
    def error_handling(self):
        return self.option_set.error_handling

    @error_handling.setter
    def error_handling(self, value):
        self.option_set.error_handling = value

    @property
    def output(self):
        return self.option_set.output

    @output.setter
    def output(self, value):
        self.option_set.output = value

    @property
    def usage(self):
        "Called when parsing fails, or on -help.  Assign a function to replace it."
        return self.option_set.usage

    @usage.setter
    def usage(self, value):
        self.option_set.usage = value

    def bind(self, reference, name, usage='', delimiter=''):
        """
        Binds the flag -name to reference.

        reference must be a flagbind.Reference (a Var, or an
        AttributeReference).  If its annotation is a list,
        every occurrence of the flag appends to it, and if
        delimiter is a non-empty string each occurrence is
        split on delimiter first.  Otherwise the last
        occurrence wins, and delimiter is ignored.
        """
        if not isinstance(reference, Reference):
            raise NotAReferenceError(f"can't bind flag {name!r} to {reference!r}, it isn't a flagbind.Reference")
        if not (name and isinstance(name, str)):
            raise ConfigurationError(f"flag name must be a non-empty string, not {name!r}")
        if self.option_set.lookup(name) is not None:
            prefix = f"{self.name} " if self.name else ""
            raise DuplicateFlagError(f"{prefix}flag redefined: {name}")

        try:
            kind, is_sequence = resolve_annotation(reference.annotation)
        except UnsupportedTypeError as e:
            raise UnsupportedTypeError(f"{e} for flag {name!r}") from None

        if not is_sequence:
            self.option_set.var(ScalarValue(kind, reference), name, usage)
            if self.log:
                self.log(f"bind -{name} to {kind.value} {reference!r}")
            return

        accumulator = MultiArg[kind](delimiter)
        self.option_set.var(accumulator, name, usage)
        self.deferred.append(DeferredCommit(name, accumulator, reference))
        if self.log:
            self.log(f"bind -{name} to list of {kind.value} {reference!r} delimiter={delimiter!r}")

    def bind_with_delimiter(self, reference, name, usage, delimiter):
        return self.bind(reference, name, usage, delimiter)

    def bind_struct(self, record):
        """
        Binds every tagged field of record.

        record should be an instance of a dataclass (or any
        class with annotated fields).  A field is bound if it
        has a tag, either in its dataclass metadata:

            ip: list[str] = flagbind.flag_field("ip,del=',',usage='The IP address'")

        or in its annotation:

            ip: Annotated[list[str], flagbind.Tag("ip,del=','")] = ...

        Fields whose names start with an underscore are skipped,
        as are fields with no tag, or a tag that doesn't name a flag.
        Frozen dataclasses and named tuples can't be written to,
        so they raise NotAReferenceError.
        """
        if isinstance(record, type):
            raise NotAReferenceError(f"bind_struct() needs an instance, not the class {record.__name__}")
        cls = type(record)
        if dataclasses.is_dataclass(record) and cls.__dataclass_params__.frozen:
            raise NotAReferenceError(f"can't bind fields of {cls.__name__}, it's a frozen dataclass")
        if isinstance(record, tuple) and (cls.__module__ != 'builtins'):
            raise NotAReferenceError(f"can't bind fields of {cls.__name__}, tuples are immutable")

        for field, annotation, tag in record_fields(record):
            if field.startswith('_') or (tag is None):
                continue
            try:
                triple = parse_tag(tag, strict=self.strict_tags)
                if (triple is None) or (not triple.name):
                    if self.log:
                        self.log(f"skip field {field}, tag {tag!r} doesn't declare a flag")
                    continue
                self.bind(AttributeReference(record, field, annotation), triple.name, triple.usage, triple.delimiter)
            except ConfigurationError as e:
                error = e.__class__(f"couldn't bind field {field!r} of {cls.__name__}: {e}")
                error.field = field
                raise error from e

    def var(self, value, name, usage=''):
        "Registers a Value of your own as the handler for -name."
        if not isinstance(value, Value):
            raise ConfigurationError(f"can't register {value!r} for flag {name!r}, it isn't a flagbind.Value")
        self.option_set.var(value, name, usage)

    def parse(self, arguments):
        """
        Parses flags from arguments, which shouldn't include
        the program name.  Stops at the first non-flag argument,
        or just after "--"; the rest are available from args().
        """
        log = self.log
        if log:
            log.enter(f"parse {self.name}")
        try:
            self.option_set.parse(arguments)
            if log:
                log("commit start")
            for deferred in self.deferred:
                committed = deferred.commit()
                if log and committed:
                    log(f"commit -{deferred.name} {deferred.reference.get()!r}")
        finally:
            if log:
                log.exit()

    def parsed(self):
        return self.option_set.parsed()

    def args(self):
        return self.option_set.args()

    def arg(self, i):
        return self.option_set.arg(i)

    def nargs(self):
        return self.option_set.nargs()

    def nflags(self):
        return self.option_set.nflags()

    def lookup(self, name):
        return self.option_set.lookup(name)

    def set(self, name, value):
        self.option_set.set(name, value)

    def visit(self, fn):
        self.option_set.visit(fn)

    def visit_all(self, fn):
        self.option_set.visit_all(fn)

    def print_defaults(self):
        self.option_set.print_defaults()


##
## Records
##

def annotated_tag(annotation):
    "Returns the last flagbind.Tag in an Annotated annotation, or None."
    if isinstance(annotation, AnnotatedType):
        for metadata in reversed(annotation.__metadata__):
            if isinstance(metadata, Tag):
                return str(metadata)
    return None


def record_fields(record):
    """
    Yields (name, annotation, tag) for every field of record,
    in declaration order.  tag is None if the field has none.

    Raises NotAStructError if record doesn't have fields.
    """
    cls = type(record)
    is_dataclass = dataclasses.is_dataclass(record)
    if (not is_dataclass) and (cls.__module__ == 'builtins'):
        raise NotAStructError(f"can't bind {record!r}, {cls.__name__} objects don't have fields")

    try:
        hints = typing.get_type_hints(cls, include_extras=True)
    except NameError as e:
        raise ConfigurationError(f"can't resolve the annotations of {cls.__name__}: {e}") from e

    if is_dataclass:
        fields = dataclasses.fields(record)
        names = [f.name for f in fields]
        metadata = {f.name: f.metadata for f in fields}
    elif hints:
        names = list(hints)
        metadata = {}
    else:
        raise NotAStructError(f"can't bind {record!r}, {cls.__name__} objects don't have fields")

    for name in names:
        annotation = hints.get(name)
        tag = metadata.get(name, {}).get(TAG_KEY)
        if tag is None:
            tag = annotated_tag(annotation)
        yield name, annotation, tag


def flag_field(tag, **kwargs):
    """
    A dataclasses.field() that carries a flagbind tag:

        @dataclass
        class Options:
            count: int = flagbind.flag_field("cnt,usage='The count'", default=1)
    """
    metadata = dict(kwargs.pop('metadata', None) or {})
    metadata[TAG_KEY] = tag
    return dataclasses.field(metadata=metadata, **kwargs)


##
## The default flag set, named after the program,
## and module-level functions that use it.
##

command_line = FlagSet(basename(sys.argv[0]) if sys.argv else '', ErrorHandling.EXIT_ON_ERROR)


def bind(reference, name, usage='', delimiter=''):
    command_line.bind(reference, name, usage, delimiter)

def bind_with_delimiter(reference, name, usage, delimiter):
    command_line.bind_with_delimiter(reference, name, usage, delimiter)

def bind_struct(record):
    command_line.bind_struct(record)

def var(value, name, usage=''):
    command_line.var(value, name, usage)

def parse(arguments=None):
    "Parses arguments (sys.argv[1:] by default) into command_line."
    if arguments is None:
        arguments = sys.argv[1:]
    command_line.parse(arguments)

def parsed():
    return command_line.parsed()

def args():
    return command_line.args()

def arg(i):
    return command_line.arg(i)

def nargs():
    return command_line.nargs()

def nflags():
    return command_line.nflags()

def lookup(name):
    return command_line.lookup(name)

def visit(fn):
    command_line.visit(fn)

def visit_all(fn):
    command_line.visit_all(fn)

def print_defaults():
    command_line.print_defaults()

def usage():
    command_line.usage()

# shadows the builtin in this module, so it's defined last
def set(name, value):
    command_line.set(name, value)
