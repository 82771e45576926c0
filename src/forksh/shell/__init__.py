"""
See `forksh.shell.executor`
"""

# explicit API exposure
# "noqa" suppresses linting errors (flake8)
from forksh.shell.errors import ShellError, ShellSyntaxError, ShellTypeError  # noqa
from forksh.shell.executor import Executor, run  # noqa
from forksh.shell.result import SHELL_EXIT, ExitStatus, Role, SpawnedProcess  # noqa
