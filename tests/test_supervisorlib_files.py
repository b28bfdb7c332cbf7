import os
import os.path
import stat
import tempfile
import unittest

from supervisorlib.plumbing import files
from supervisorlib.plumbing.common import State


class TestFiles(unittest.TestCase):

    def setUp(self):
        self.tempdir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tempdir.name, "test.conf")

    def tearDown(self):
        self.tempdir.cleanup()

    def mode(self):
        return stat.S_IMODE(os.stat(self.path).st_mode)

    def test_conf_path(self):
        self.assertEqual(files.conf_path("web", "/etc/supervisor.d"), "/etc/supervisor.d/web.conf")

    def test_write_created(self):
        result = files.write_file(self.path, "content")
        self.assertEqual(result.state, State.created)
        with open(self.path) as f:
            self.assertEqual(f.read(), "content")
        self.assertEqual(self.mode(), 0o644)

    def test_write_unchanged(self):
        files.write_file(self.path, "content")
        self.assertEqual(files.write_file(self.path, "content").state, State.unchanged)

    def test_write_replaced(self):
        files.write_file(self.path, "content")
        self.assertEqual(files.write_file(self.path, "other").state, State.success)
        with open(self.path) as f:
            self.assertEqual(f.read(), "other")

    def test_write_mode(self):
        files.write_file(self.path, "content")
        result = files.write_file(self.path, "content", 0o600)
        self.assertEqual(result.state, State.success)
        self.assertEqual(self.mode(), 0o600)

    def test_write_no_temp_left(self):
        files.write_file(self.path, "content")
        files.write_file(self.path, "other")
        self.assertEqual(os.listdir(self.tempdir.name), ["test.conf"])

    def test_remove(self):
        files.write_file(self.path, "content")
        self.assertEqual(files.remove_file(self.path).state, State.success)
        self.assertFalse(os.path.exists(self.path))

    def test_remove_unchanged(self):
        self.assertEqual(files.remove_file(self.path).state, State.unchanged)


if __name__ == "__main__":
    unittest.main()
