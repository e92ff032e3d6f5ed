#!/usr/bin/env python3


# part of the flagbind software package
# Copyright 2021-2023 by Larry Hastings
# All rights reserved.
#
# Permission is hereby granted, free of charge, to any person obtaining a
# copy of this software and associated documentation files (the "Software"),
# to deal in the Software without restriction, including without limitation
# the rights to use, copy, modify, merge, publish, distribute, sublicense,
# and/or sell copies of the Software, and to permit persons to whom the
# Software is furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included
# in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT.
# IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM,
# DAMAGES OR OTHER LIABILITY, WHETHER IN AN ACTION OF CONTRACT,
# TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE
# OR THE USE OR OTHER DEALINGS IN THE SOFTWARE.


import math
import typing
import unittest


def preload_local_flagbind():
    """
    Pre-load the local "flagbind" module, to preclude finding
    an already-installed one on the path.
    """
    from os.path import abspath, dirname, isfile, join, normpath
    import sys
    flagbind_dir = abspath(dirname(__file__))
    while True:
        flagbind_init = join(flagbind_dir, "flagbind/__init__.py")
        if isfile(flagbind_init):
            break
        parent = normpath(join(flagbind_dir, ".."))
        if parent == flagbind_dir:
            raise RuntimeError("couldn't find the local flagbind package")
        flagbind_dir = parent
    sys.path.insert(1, flagbind_dir)
    import flagbind
    return flagbind_dir

flagbind_dir = preload_local_flagbind()
import flagbind
from flagbind import values
from flagbind.values import Kind


class ConverterTests(unittest.TestCase):

    def assert_conversion_error(self, fn, text, reason="parse error"):
        with self.assertRaises(flagbind.ConversionError) as cm:
            fn(text)
        self.assertEqual(cm.exception.reason, reason)
        self.assertEqual(cm.exception.text, text)
        return cm.exception

    def test_int(self):
        self.assertEqual(values.parse_int("-1"), -1)
        self.assertEqual(values.parse_int("+7"), 7)
        self.assertEqual(values.parse_int("0"), 0)
        self.assertEqual(values.parse_int("0x10"), 16)
        self.assertEqual(values.parse_int("0X_ff"), 255)
        self.assertEqual(values.parse_int("0b101"), 5)
        self.assertEqual(values.parse_int("0o17"), 15)
        self.assertEqual(values.parse_int("010"), 8)
        self.assertEqual(values.parse_int("-0x10"), -16)

        for text in ("", " 1", "1 ", "1_000", "09", "1.0", "abc", "--1", "0x"):
            with self.subTest(text=text):
                self.assert_conversion_error(values.parse_int, text)

    def test_int_ranges(self):
        self.assertEqual(values.parse_int("9223372036854775807"), 2**63 - 1)
        self.assertEqual(values.parse_int64("-9223372036854775808"), -2**63)
        self.assert_conversion_error(values.parse_int, "9223372036854775808", "value out of range")
        self.assert_conversion_error(values.parse_int64, "-9223372036854775809", "value out of range")

        self.assertEqual(values.parse_int32("-2147483648"), -2**31)
        self.assert_conversion_error(values.parse_int32, "2147483648", "value out of range")

    def test_uint(self):
        self.assertEqual(values.parse_uint("2"), 2)
        self.assertEqual(values.parse_uint64("18446744073709551615"), 2**64 - 1)
        self.assertEqual(values.parse_uint32("4294967295"), 2**32 - 1)
        self.assertEqual(values.parse_uint("0x1f"), 31)

        self.assert_conversion_error(values.parse_uint, "-1")
        self.assert_conversion_error(values.parse_uint, "+1")
        self.assert_conversion_error(values.parse_uint64, "18446744073709551616", "value out of range")
        self.assert_conversion_error(values.parse_uint32, "4294967296", "value out of range")

    def test_float(self):
        self.assertEqual(values.parse_float64("1.2"), 1.2)
        self.assertEqual(values.parse_float64("1e3"), 1000.0)
        self.assertEqual(values.parse_float64("-.5"), -0.5)
        self.assertEqual(values.parse_float64("1."), 1.0)
        self.assertEqual(values.parse_float64("7"), 7.0)
        self.assertEqual(values.parse_float64("0x1p-2"), 0.25)
        self.assertEqual(values.parse_float64("inf"), math.inf)
        self.assertEqual(values.parse_float64("-Infinity"), -math.inf)
        self.assertTrue(math.isnan(values.parse_float64("NaN")))

        self.assert_conversion_error(values.parse_float64, "1e400", "value out of range")
        for text in ("", "abc", "1.2.3", " 1", "1e", "0x1"):
            with self.subTest(text=text):
                self.assert_conversion_error(values.parse_float64, text)

    def test_bool(self):
        for text in ("1", "t", "T", "TRUE", "true", "True"):
            self.assertIs(values.parse_bool(text), True)
        for text in ("0", "f", "F", "FALSE", "false", "False"):
            self.assertIs(values.parse_bool(text), False)
        for text in ("", "yes", "tRuE", "2"):
            with self.subTest(text=text):
                self.assert_conversion_error(values.parse_bool, text)

    def test_string(self):
        self.assertEqual(values.parse_string(""), "")
        self.assertEqual(values.parse_string(" d3d "), " d3d ")

    def test_conversion_error_is_a_value_error(self):
        e = self.assert_conversion_error(values.parse_int, "x")
        self.assertIsInstance(e, ValueError)
        self.assertIs(e.kind, Kind.INT)
        self.assertEqual(str(e), "parse error")

    def test_format_value(self):
        self.assertEqual(values.format_value(Kind.BOOL, True), "true")
        self.assertEqual(values.format_value(Kind.BOOL, False), "false")
        self.assertEqual(values.format_value(Kind.FLOAT64, 2.0), "2")
        self.assertEqual(values.format_value(Kind.FLOAT64, 1.5), "1.5")
        self.assertEqual(values.format_value(Kind.FLOAT64, -math.inf), "-Inf")
        self.assertEqual(values.format_value(Kind.INT, None), "0")
        self.assertEqual(values.format_value(Kind.STRING, "abc"), "abc")


class AnnotationTests(unittest.TestCase):

    def test_scalars(self):
        self.assertEqual(values.resolve_annotation(int), (Kind.INT, False))
        self.assertEqual(values.resolve_annotation(flagbind.int32), (Kind.INT32, False))
        self.assertEqual(values.resolve_annotation(flagbind.int64), (Kind.INT64, False))
        self.assertEqual(values.resolve_annotation(flagbind.uint), (Kind.UINT, False))
        self.assertEqual(values.resolve_annotation(flagbind.uint32), (Kind.UINT32, False))
        self.assertEqual(values.resolve_annotation(flagbind.uint64), (Kind.UINT64, False))
        self.assertEqual(values.resolve_annotation(float), (Kind.FLOAT64, False))
        self.assertEqual(values.resolve_annotation(flagbind.float64), (Kind.FLOAT64, False))
        self.assertEqual(values.resolve_annotation(str), (Kind.STRING, False))
        self.assertEqual(values.resolve_annotation(bool), (Kind.BOOL, False))
        self.assertEqual(values.resolve_annotation(Kind.UINT64), (Kind.UINT64, False))

    def test_sequences(self):
        self.assertEqual(values.resolve_annotation(list[int]), (Kind.INT, True))
        self.assertEqual(values.resolve_annotation(typing.List[str]), (Kind.STRING, True))
        self.assertEqual(values.resolve_annotation(list[flagbind.uint32]), (Kind.UINT32, True))
        self.assertEqual(values.resolve_annotation(typing.Annotated[list[float], "x"]), (Kind.FLOAT64, True))

    def test_unsupported(self):
        for annotation in (dict, complex, list, list[bool], list[list[int]], tuple[int], typing.Optional[int], None):
            with self.subTest(annotation=annotation):
                with self.assertRaises(flagbind.UnsupportedTypeError):
                    values.resolve_annotation(annotation)

    def test_unsupported_message_names_the_type(self):
        with self.assertRaises(flagbind.UnsupportedTypeError) as cm:
            values.resolve_annotation(complex)
        self.assertIn("complex", str(cm.exception))


class MultiArgTests(unittest.TestCase):

    def test_subscription_is_cached(self):
        self.assertIs(flagbind.MultiArg[int], flagbind.MultiArgInt)
        self.assertIs(flagbind.MultiArg[Kind.UINT64], flagbind.MultiArgUint64)
        self.assertIs(flagbind.MultiArg[float], flagbind.MultiArg[flagbind.float64])
        self.assertEqual(flagbind.MultiArgInt.__name__, "MultiArg[int]")
        self.assertIs(flagbind.MultiArgString.kind, Kind.STRING)

    def test_no_lists_of_bool(self):
        with self.assertRaises(flagbind.UnsupportedTypeError):
            flagbind.MultiArg[bool]
        with self.assertRaises(flagbind.UnsupportedTypeError):
            flagbind.MultiArg[dict]

    def test_accumulates_in_order(self):
        m = flagbind.MultiArgInt(",")
        m.set("1,2")
        m.set("3")
        self.assertEqual(m.get(), [1, 2, 3])
        self.assertEqual(str(m), "[1 2 3]")

    def test_occurrence_is_all_or_nothing(self):
        m = flagbind.MultiArgInt(",")
        m.set("1")
        with self.assertRaises(flagbind.ConversionError):
            m.set("2,x,3")
        self.assertEqual(m.get(), [1])

    def test_without_delimiter_nothing_is_split(self):
        m = flagbind.MultiArgString()
        m.set("a,b")
        self.assertEqual(m.get(), ["a,b"])

    def test_empty_pieces_are_kept(self):
        m = flagbind.MultiArgString(",")
        m.set("a,,b")
        self.assertEqual(m.get(), ["a", "", "b"])

    def test_multicharacter_delimiter(self):
        m = flagbind.MultiArgUint("::")
        m.set("1::2")
        self.assertEqual(m.get(), [1, 2])

    def test_snapshot_is_a_copy(self):
        m = flagbind.MultiArgFloat64()
        m.set("1.5")
        m.set("2")
        snapshot = m.snapshot()
        m.set("3")
        self.assertEqual(snapshot, [1.5, 2.0])
        self.assertEqual(str(m), "[1.5 2 3]")

    def test_value_protocol(self):
        m = flagbind.MultiArgInt32()
        self.assertIsInstance(m, flagbind.Value)
        self.assertFalse(m.is_bool_flag)
        self.assertEqual(m.usage_type_name, "value")
        self.assertEqual(str(m), m.zero_text)


class ScalarValueTests(unittest.TestCase):

    def test_writes_through(self):
        v = flagbind.Var(int, 5)
        sv = flagbind.ScalarValue(Kind.INT, v)
        self.assertEqual(str(sv), "5")
        self.assertEqual(sv.zero_text, "0")
        sv.set("7")
        self.assertEqual(v.value, 7)
        self.assertEqual(sv.get(), 7)

    def test_bool(self):
        v = flagbind.Var(bool)
        sv = flagbind.ScalarValue(Kind.BOOL, v)
        self.assertTrue(sv.is_bool_flag)
        self.assertEqual(sv.usage_type_name, "")
        self.assertEqual(str(sv), "false")
        sv.set("true")
        self.assertIs(v.value, True)

    def test_failed_conversion_leaves_destination_alone(self):
        v = flagbind.Var(flagbind.uint32, 9)
        sv = flagbind.ScalarValue(Kind.UINT32, v)
        with self.assertRaises(flagbind.ConversionError):
            sv.set("-1")
        self.assertEqual(v.value, 9)


if __name__ == "__main__":
    unittest.main()
