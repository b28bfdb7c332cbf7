from inspect import cleandoc
import unittest

from supervisorlib.plumbing.supervisor import ServiceIdentity
from supervisorlib.templating import Program, render


class TestRender(unittest.TestCase):

    maxDiff = None

    def test_minimal(self):
        self.assertEqual(render(Program("web", "/usr/bin/web --port 80")), cleandoc("""
        ; Managed by supervisorlib, local changes will be overwritten.
        [program:web]
        command=/usr/bin/web --port 80
        """) + "\n")

    def test_options(self):
        program = Program("web", "/usr/bin/web", autostart=False, autorestart="unexpected",
                          exitcodes=(0, 2), user="www-data", environment={"B": "2", "A": 'x"y'})
        self.assertEqual(render(program), cleandoc("""
        ; Managed by supervisorlib, local changes will be overwritten.
        [program:web]
        command=/usr/bin/web
        autostart=false
        autorestart=unexpected
        exitcodes=0,2
        user=www-data
        environment=A="x\\"y",B="2"
        """) + "\n")

    def test_numprocs(self):
        rendered = render(Program("worker", "/usr/bin/worker", numprocs=3))
        self.assertIn("numprocs=3\n", rendered)
        self.assertIn("process_name=%(program_name)s_%(process_num)02d\n", rendered)

    def test_numprocs_process_name(self):
        rendered = render(Program("worker", "/usr/bin/worker", numprocs=2,
                                  process_name="w%(process_num)d"))
        self.assertIn("process_name=w%(process_num)d\n", rendered)

    def test_identity(self):
        self.assertEqual(Program("worker", "/bin/true", numprocs=2).identity,
                         ServiceIdentity("worker", 2))


if __name__ == "__main__":
    unittest.main()
