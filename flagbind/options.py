# please leave this copyright notice in binary distributions.
license = """
flagbind/options.py
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
## OptionSet is the option-parsing layer flagbind sits on.
## It knows nothing about types; each flag is registered
## with a Value, and the Value's set() method does the work.
##
## Command-line syntax:
##
##     -flag            (boolean flags only)
##     -flag=value
##     -flag value      (non-boolean flags only)
##
## One or two leading dashes are equivalent.  Flag parsing
## stops just before the first argument that isn't a flag
## (a lone "-" counts as a non-flag), or just after the
## terminator "--".  Everything after that is left in args().
##

import enum
import sys

from big.itertools import PushbackIterator

from .errors import ConfigurationError, DuplicateFlagError, HelpRequested, UsageError


class ErrorHandling(enum.Enum):
    """
    What OptionSet.parse does when the command-line is bad.

        CONTINUE_ON_ERROR  prints the error and usage, then
                           raises the UsageError.
        EXIT_ON_ERROR      prints the error and usage, then
                           exits with status 2 (0 for -help).
        RAISE_ON_ERROR     raises the UsageError, prints nothing.
    """
    CONTINUE_ON_ERROR = "continue"
    EXIT_ON_ERROR = "exit"
    RAISE_ON_ERROR = "raise"

CONTINUE_ON_ERROR = ErrorHandling.CONTINUE_ON_ERROR
EXIT_ON_ERROR = ErrorHandling.EXIT_ON_ERROR
RAISE_ON_ERROR = ErrorHandling.RAISE_ON_ERROR


def quote(s):
    "Double-quotes s, escaping backslashes and double quotes."
    s = s.replace('\\', '\\\\').replace('"', '\\"')
    return f'"{s}"'


class Flag:
    """
    One registered flag.

    default is str(value) at the moment the flag was
    registered; the defaults listing compares it against
    value.zero_text to decide whether to show it.
    """
    def __init__(self, name, usage, value, default):
        self.name = name
        self.usage = usage
        self.value = value
        self.default = default

    def __repr__(self):
        return f"<Flag -{self.name} value={self.value!r} default={self.default!r}>"


def unquote_usage(flag):
    """
    Returns (type_name, usage) for flag.

    If usage contains a back-quoted word, that word is the
    type name, and the back-quotes are removed from usage:

        "load configuration from `file`"

    returns ("file", "load configuration from file").
    Otherwise the type name comes from the flag's value;
    boolean flags have none.
    """
    usage = flag.usage
    start = usage.find('`')
    if start != -1:
        end = usage.find('`', start + 1)
        if end != -1:
            name = usage[start + 1:end]
            return name, usage[:start] + name + usage[end + 1:]
    if flag.value.is_bool_flag:
        return "", usage
    return flag.value.usage_type_name, usage


class OptionSet:
    def __init__(self, name='', error_handling=ErrorHandling.CONTINUE_ON_ERROR):
        self.name = name
        self.error_handling = error_handling
        self.formal = {}
        self.actual = {}
        self._args = []
        self._parsed = False
        self._output = None
        self.usage = self.default_usage

    def __repr__(self):
        return f"<OptionSet {self.name!r} flags={sorted(self.formal)} parsed={self._parsed}>"

    @property
    def output(self):
        return self._output or sys.stderr

    @output.setter
    def output(self, value):
        self._output = value

    def var(self, value, name, usage=''):
        """
        Registers value as the handler for -name.
        Returns the new Flag.
        """
        if not (name and isinstance(name, str)):
            raise ConfigurationError(f"flag name must be a non-empty string, not {name!r}")
        if name.startswith('-'):
            raise ConfigurationError(f"flag {name!r} begins with -")
        if '=' in name:
            raise ConfigurationError(f"flag {name!r} contains =")
        if name in self.formal:
            prefix = f"{self.name} " if self.name else ""
            raise DuplicateFlagError(f"{prefix}flag redefined: {name}")
        flag = Flag(name, usage, value, str(value))
        self.formal[name] = flag
        return flag

    def lookup(self, name):
        return self.formal.get(name)

    def set(self, name, value):
        """
        Sets flag name to value, as if "-name=value"
        had been on the command-line.
        """
        flag = self.formal.get(name)
        if flag is None:
            raise UsageError(f"no such flag -{name}")
        flag.value.set(value)
        self.actual[name] = flag

    def visit(self, fn):
        "Calls fn(flag) for every flag that has been set, sorted by name."
        for name in sorted(self.actual):
            fn(self.actual[name])

    def visit_all(self, fn):
        "Calls fn(flag) for every flag, sorted by name."
        for name in sorted(self.formal):
            fn(self.formal[name])

    def parsed(self):
        return self._parsed

    def args(self):
        return list(self._args)

    def arg(self, i):
        "Returns the i'th remaining argument, or an empty string if there isn't one."
        if 0 <= i < len(self._args):
            return self._args[i]
        return ""

    def nargs(self):
        return len(self._args)

    def nflags(self):
        return len(self.actual)

    def defaults(self):
        lines = []
        for name in sorted(self.formal):
            flag = self.formal[name]
            line = f"  -{flag.name}"
            type_name, usage = unquote_usage(flag)
            if type_name:
                line += " " + type_name
            # one-letter boolean flags fit their usage on the same line
            if len(line) <= 4:
                line += "\t"
            else:
                line += "\n    \t"
            line += usage.replace("\n", "\n    \t")
            if flag.default != flag.value.zero_text:
                if flag.value.quote_default:
                    line += f" (default {quote(flag.default)})"
                else:
                    line += f" (default {flag.default})"
            lines.append(line + "\n")
        return "".join(lines)

    def print_defaults(self):
        self.output.write(self.defaults())

    def default_usage(self):
        if self.name:
            self.output.write(f"Usage of {self.name}:\n")
        else:
            self.output.write("Usage:\n")
        self.print_defaults()

    def failed(self, e):
        if self.error_handling == ErrorHandling.RAISE_ON_ERROR:
            return
        if not isinstance(e, HelpRequested):
            print(e, file=self.output)
        self.usage()
        if self.error_handling == ErrorHandling.EXIT_ON_ERROR:
            sys.exit(0 if isinstance(e, HelpRequested) else 2)

    def _parse_one(self, i):
        s = next(i, None)
        if s is None:
            return False
        if (len(s) < 2) or (s[0] != '-'):
            i.push(s)
            return False

        dashes = 1
        if s[1] == '-':
            dashes = 2
            if len(s) == 2:
                # "--" terminates the flags
                return False

        name = s[dashes:]
        if (not name) or (name[0] in '-='):
            raise UsageError(f"bad flag syntax: {s}")

        name, equals, value = name.partition('=')
        has_value = bool(equals)

        flag = self.formal.get(name)
        if flag is None:
            if name in ("help", "h"):
                raise HelpRequested("flag: help requested")
            raise UsageError(f"flag provided but not defined: -{name}")

        if flag.value.is_bool_flag:
            if not has_value:
                value = "true"
            try:
                flag.value.set(value)
            except ValueError as e:
                if has_value:
                    raise UsageError(f"invalid boolean value {quote(value)} for -{name}: {e}") from e
                raise UsageError(f"invalid boolean flag {name}: {e}") from e
        else:
            if not has_value:
                value = next(i, None)
                if value is None:
                    raise UsageError(f"flag needs an argument: -{name}")
            try:
                flag.value.set(value)
            except ValueError as e:
                raise UsageError(f"invalid value {quote(value)} for flag -{name}: {e}") from e

        self.actual[name] = flag
        return True

    def parse(self, arguments):
        """
        Parses flags from arguments, which shouldn't include
        the program name.  The arguments left over after the
        flags are available from args() and arg().
        """
        self._parsed = True
        i = PushbackIterator(arguments)
        try:
            while self._parse_one(i):
                pass
        except UsageError as e:
            self._args = list(i)
            self.failed(e)
            raise
        self._args = list(i)
