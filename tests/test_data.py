"""Tests for parsing, validation, formatting and serialisation of instances."""
import os
import shutil
import tempfile
import unittest

import data

EXAMPLE = """3
A
B
C
1 2 3
2 1 3
1 2 3
X
Y
Z
2 1 3
1 2 3
1 2 3
"""


def example_lines():
    return EXAMPLE.splitlines(keepends=True)


class TestParseInstance(unittest.TestCase):

    def test_valid(self):
        instance = data.parse_instance(example_lines())
        self.assertEqual(instance["n"], 3)
        self.assertEqual(instance["proposers"], ["A", "B", "C"])
        self.assertEqual(instance["responders"], ["X", "Y", "Z"])
        self.assertEqual(instance["prefP"][1], [1, 0, 2])
        self.assertEqual(instance["prefS"][0], [1, 0, 2])

    def test_trailing_blank_lines_ignored(self):
        instance = data.parse_instance(example_lines() + ["\n", "   \n"])
        self.assertEqual(instance["n"], 3)

    def test_windows_line_endings(self):
        lines = [line.rstrip("\n") + "\r\n" for line in example_lines()]
        instance = data.parse_instance(lines)
        self.assertEqual(instance["responders"][2], "Z")

    def test_duplicate_id(self):
        lines = example_lines()
        lines[4] = "1 1 3\n"
        with self.assertRaises(data.InputError) as ctx:
            data.parse_instance(lines)
        self.assertEqual(ctx.exception.lineno, 5)
        self.assertIn("A", str(ctx.exception))

    def test_non_numeric_token(self):
        lines = example_lines()
        lines[11] = "1 two 3\n"
        with self.assertRaises(data.InputError) as ctx:
            data.parse_instance(lines)
        self.assertEqual(ctx.exception.lineno, 12)

    def test_out_of_range(self):
        lines = example_lines()
        lines[10] = "1 2 4\n"
        with self.assertRaises(data.InputError) as ctx:
            data.parse_instance(lines)
        self.assertEqual(ctx.exception.lineno, 11)

    def test_wrong_token_count(self):
        lines = example_lines()
        lines[6] = "1 2\n"
        with self.assertRaises(data.InputError) as ctx:
            data.parse_instance(lines)
        self.assertEqual(ctx.exception.lineno, 7)

    def test_missing_lines(self):
        with self.assertRaises(data.InputError) as ctx:
            data.parse_instance(example_lines()[:-2])
        self.assertEqual(ctx.exception.lineno, 12)

    def test_trailing_data(self):
        with self.assertRaises(data.InputError):
            data.parse_instance(example_lines() + ["extra\n"])

    def test_bad_header(self):
        for header in ("three\n", "0\n", "-2\n"):
            lines = example_lines()
            lines[0] = header
            with self.assertRaises(data.InputError) as ctx:
                data.parse_instance(lines)
            self.assertEqual(ctx.exception.lineno, 1)

    def test_empty_input(self):
        with self.assertRaises(data.InputError):
            data.parse_instance([])

    def test_empty_name(self):
        lines = example_lines()
        lines[8] = "  \n"
        with self.assertRaises(data.InputError) as ctx:
            data.parse_instance(lines)
        self.assertEqual(ctx.exception.lineno, 9)


class TestFiles(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_read_instance(self):
        path = os.path.join(self.tmpdir, "instance.txt")
        with open(path, "w") as f:
            f.write(EXAMPLE)
        instance = data.read_instance(path)
        self.assertEqual(instance["proposers"], ["A", "B", "C"])

    def test_missing_file(self):
        path = os.path.join(self.tmpdir, "missing.txt")
        with self.assertRaises(data.DataFileError) as ctx:
            data.read_instance(path)
        self.assertIsInstance(ctx.exception.cause, OSError)
        self.assertEqual(ctx.exception.filename, path)

    def test_file_not_utf8(self):
        path = os.path.join(self.tmpdir, "latin.txt")
        with open(path, "wb") as f:
            f.write(b"1\n\xff\xfe\n1\nR\n1\n")
        with self.assertRaises(data.DataFileError) as ctx:
            data.read_instance(path)
        self.assertIsInstance(ctx.exception.cause, UnicodeDecodeError)

    def test_serialize(self):
        instance = data.parse_instance(example_lines())
        base = os.path.join(self.tmpdir, "saved")
        data.serialize(instance, base)

        self.assertEqual(data.deserialize(base), instance)
        self.assertEqual(data.read_instance(base + ".txt"), instance)
        with open(base + ".txt") as f:
            self.assertEqual(f.read(), EXAMPLE)


class TestFormatting(unittest.TestCase):

    def setUp(self):
        self.instance = data.parse_instance(example_lines())

    def test_format_matches(self):
        lines = data.format_matches(self.instance, [0, 1, 2])
        self.assertEqual(lines, ["A / X", "B / Y", "C / Z"])

    def test_match_ranks(self):
        rankP, rankS = data.match_ranks(self.instance, [0, 1, 2])
        self.assertEqual(list(rankP), [1, 1, 3])
        self.assertEqual(list(rankS), [2, 2, 3])


if __name__ == "__main__":
    unittest.main()
