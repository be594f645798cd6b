import contextlib
import io
import os
import unittest
from unittest import mock

from x86asmtest.util import LogType, log


class LogTestCase(unittest.TestCase):
    def logged(self, silencelog):
        env = {} if silencelog is None else {"SILENCELOG": silencelog}
        out = io.StringIO()
        with mock.patch.dict(os.environ, env):
            if silencelog is None:
                os.environ.pop("SILENCELOG", None)
            with contextlib.redirect_stdout(out):
                for kind in LogType:
                    log(kind.value, kind=kind)
        return out.getvalue().split()

    def test_unset(self):
        self.assertEqual(self.logged(None),
                         ["default", "skip_case", "encode_fail"])

    def test_silence_all(self):
        for value in ("1", "true", ""):
            with self.subTest(value=value):
                self.assertEqual(self.logged(value), [])

    def test_silence_none(self):
        self.assertEqual(self.logged("0"),
                         ["default", "skip_case", "encode_fail"])

    def test_patterns(self):
        self.assertEqual(self.logged("!encode_fail"), ["encode_fail"])
        self.assertEqual(self.logged("*,!*_*"), ["skip_case", "encode_fail"])

    def test_unknown(self):
        with self.assertRaises(ValueError):
            self.logged("no_such_kind")


if __name__ == "__main__":
    unittest.main()
