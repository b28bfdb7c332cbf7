import code
import logging

from supervisorlib import plumbing as p, templating
from supervisorlib.plumbing.common import *
from supervisorlib.plumbing.supervisor import *
from supervisorlib.tasks import service


ctl = Supervisorctl()


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    code.interact(local=globals())
