"""Evaluate a command tree by means of OS processes and file descriptors.

.. code-block:: python

    from forksh.shell.ast import command, pipe
    from forksh.shell.executor import run

    run(pipe(command('yes'), command('head', '-n', '3')))

Concurrency is achieved exclusively through forked processes; the evaluator
itself only blocks in `os.waitpid`.
"""
from typing import Callable, Dict, List, Optional
import logging
import os
import signal
import traceback

from forksh.io_util import EXIT_FAILURE, STDERR_FILENO, STDIN_FILENO, STDOUT_FILENO, die, \
    flush_std_streams, println_fd
from forksh.shell import env, redirect
from forksh.shell.ast.command import IOFlags, SimpleCommand
from forksh.shell.ast.node import CommandNode, Operator
from forksh.shell.builtins import Builtins, is_builtin, is_exit_command
from forksh.shell.errors import ShellSyntaxError
from forksh.shell.redirect import Intent
from forksh.shell.result import SHELL_EXIT, SUCCESS, ExitStatus, Result, Role, SpawnedProcess, exit_code, \
    translate_wait_status

# signals that are ignored by the Python interpreter, but not by most programs
RESET_SIGNALS = ('SIGPIPE', 'SIGXFSZ')

Handler = Callable[[CommandNode, Role], Result]


class Executor:
    """Recursively evaluate a tree of `CommandNode`s.

    Each leaf saves and restores the standard file descriptors of the current
    process. Operators combine the results of their children.
    """

    def __init__(self):
        self.handlers: Dict[Operator, Handler] = {
            Operator.NONE: self._simple,
            Operator.SEQUENTIAL: self._sequential,
            Operator.PARALLEL: self._parallel,
            Operator.PIPE: self._pipe,
            Operator.CONDITIONAL_NZERO: self._if_failed,
            Operator.CONDITIONAL_ZERO: self._if_succeeded,
            Operator.DUMMY: self._dummy,
        }

    def evaluate(self, node: CommandNode, role: Role = Role.STANDALONE) -> Result:
        """Run `node` and return its result.

        Only a leaf with role `Role.PIPE_RIGHT` returns a `SpawnedProcess`,
        which must be waited for by the caller.
        """
        try:
            handler = self.handlers[node.op]
        except KeyError:
            raise ShellSyntaxError(f'Unknown operator: {node.op}')

        return handler(node, role)

    ############################################################################
    # Simple commands
    ############################################################################

    def evaluate_simple(self, cmd: SimpleCommand, role: Role = Role.STANDALONE) -> Result:
        argv = cmd.argv
        stdin = resolve(cmd.stdin)
        logging.info(f'Cmd = {cmd!r}')

        with redirect.saved_streams():
            if is_exit_command(argv[0]):
                return SHELL_EXIT

            redirect_output(cmd)

            if is_builtin(argv[0]):
                return Builtins[argv[0]](*argv[1:])

            if env.is_assignment(cmd.verb):
                return env.assign(cmd.verb)

            pid = fork()
            if pid == 0:
                exec_child(argv, stdin)

            logging.debug(f'Spawned {pid}: {argv[0]}')
            if role is Role.PIPE_RIGHT:
                # the enclosing pipe waits for this process
                return SpawnedProcess(pid)

            return wait(pid)

    def _simple(self, node: CommandNode, role: Role) -> Result:
        return self.evaluate_simple(node.scmd, role)

    ############################################################################
    # Operators
    ############################################################################

    def _sequential(self, node: CommandNode, _: Role) -> Result:
        if node.lhs is not None:
            result = self.evaluate(node.lhs)
            if result is SHELL_EXIT:
                return SHELL_EXIT

        return self.evaluate(node.rhs)

    def _parallel(self, node: CommandNode, _: Role) -> Result:
        first = self.fork_evaluate(node.lhs)
        second = self.fork_evaluate(node.rhs)

        wait(first)
        wait(second)

        # the statuses of the children are not aggregated
        return SUCCESS

    def _if_failed(self, node: CommandNode, _: Role) -> Result:
        result = self.evaluate(node.lhs)
        if result is SHELL_EXIT or result.success:
            return result

        return self.evaluate(node.rhs)

    def _if_succeeded(self, node: CommandNode, _: Role) -> Result:
        result = self.evaluate(node.lhs)
        if result is SHELL_EXIT or not result.success:
            return result

        return self.evaluate(node.rhs)

    def _pipe(self, node: CommandNode, _: Role) -> Result:
        saved = redirect.save_streams()
        try:
            read_end, write_end = redirect.make_pipe()

            left = self.fork_evaluate(node.lhs, Role.PIPE_LEFT,
                                      bind=(write_end, STDOUT_FILENO),
                                      close=(read_end, write_end))

            redirect.duplicate(read_end, STDIN_FILENO)
            redirect.close(read_end)
            redirect.close(write_end)

            result = self.evaluate(node.rhs, Role.PIPE_RIGHT)
        finally:
            # release the read end before waiting, such that the left side
            # can terminate once the right side stops reading
            saved.restore()

        wait(left)

        if isinstance(result, SpawnedProcess):
            return wait(result.pid)

        return result

    def _dummy(self, *_) -> Result:
        return SUCCESS

    ############################################################################
    # Processes
    ############################################################################

    def fork_evaluate(self, node: CommandNode, role: Role = Role.STANDALONE,
                      bind: tuple = None, close: tuple = ()) -> int:
        """Evaluate `node` in a child process and return its pid.

        Parameters
        ----------
            bind : tuple
                A pair of file descriptors (fd, target) that is duplicated in the child
            close : tuple
                File descriptors that are closed in the child, after `bind`
        """
        pid = fork()
        if pid != 0:
            logging.debug(f'Spawned {pid}: {node!r}')
            return pid

        status = EXIT_FAILURE
        try:
            # a built-in that writes to a closed pipe ends quietly, like a program would
            reset_signals()

            if bind:
                redirect.duplicate(*bind)
            for fd in close:
                redirect.close(fd)

            result = self.evaluate(node, role)
            if isinstance(result, SpawnedProcess):
                result = wait(result.pid)

            status = exit_code(result)

        except SystemExit as e:
            status = e.code if isinstance(e.code, int) else EXIT_FAILURE

        except BaseException:
            traceback.print_exc()

        finally:
            flush_std_streams()
            # never return to the stack of the parent process
            os._exit(status)


def run(node: CommandNode) -> Result:
    """Evaluate a top-level command tree.
    Returns either an ExitStatus or SHELL_EXIT.
    """
    return Executor().evaluate(node)


def resolve(word) -> Optional[str]:
    return None if word is None else str(word)


def redirect_output(cmd: SimpleCommand):
    """Redirect stdout and stderr of the current process according to `cmd.io_flags`.
    """
    out = resolve(cmd.stdout)
    err = resolve(cmd.stderr)
    flags = cmd.io_flags

    if IOFlags.OUT_APPEND in flags and IOFlags.ERR_APPEND in flags:
        if out is not None:
            redirect.redirect(STDOUT_FILENO, out, Intent.APPEND)
        if err is not None:
            redirect.redirect(STDERR_FILENO, err, Intent.APPEND)

    elif IOFlags.ERR_APPEND in flags:
        if out is not None:
            redirect.redirect(STDOUT_FILENO, out, Intent.WRITE_TRUNCATE)
        if err is not None:
            redirect.redirect(STDERR_FILENO, err, Intent.APPEND)

    elif IOFlags.OUT_APPEND in flags:
        if err is not None:
            redirect.redirect(STDERR_FILENO, err, Intent.WRITE_TRUNCATE)
        if out is not None:
            redirect.redirect(STDOUT_FILENO, out, Intent.APPEND)

    elif out is not None and out == err:
        # fan-in: truncate once, then let both streams append
        redirect.redirect(STDOUT_FILENO, out, Intent.WRITE_TRUNCATE)
        redirect.redirect(STDOUT_FILENO, out, Intent.APPEND)
        redirect.redirect(STDERR_FILENO, err, Intent.APPEND)

    else:
        if out is not None:
            redirect.redirect(STDOUT_FILENO, out, Intent.WRITE_TRUNCATE)
        if err is not None:
            redirect.redirect(STDERR_FILENO, err, Intent.WRITE_TRUNCATE)


def exec_child(argv: List[str], stdin: str = None):
    """Replace the current (child) process by `argv`. Never returns.
    """
    status = EXIT_FAILURE
    try:
        reset_signals()

        if stdin is not None:
            redirect.redirect(STDIN_FILENO, stdin, Intent.READ_ONLY)

        os.execvp(argv[0], argv)

    except FileNotFoundError:
        println_fd(STDERR_FILENO, f"Execution failed for '{argv[0]}'")

    except OSError as e:
        logging.debug(f'Exec failed: {e}')

    except SystemExit as e:
        if isinstance(e.code, int):
            status = e.code

    finally:
        flush_std_streams()
        os._exit(status)


def reset_signals():
    for name in RESET_SIGNALS:
        if hasattr(signal, name):
            signal.signal(getattr(signal, name), signal.SIG_DFL)


def fork() -> int:
    flush_std_streams()
    try:
        return os.fork()
    except OSError as e:
        die('fork', e)


def wait(pid: int) -> ExitStatus:
    try:
        _, status = os.waitpid(pid, 0)
    except ChildProcessError as e:
        die(f'waitpid {pid}', e)

    result = translate_wait_status(status)
    logging.debug(f'Process {pid} exited with status {result.code}')
    return result

