class ShellError(RuntimeError):
    """A command tree that cannot be evaluated.
    """


class ShellSyntaxError(ShellError):
    """A tree with a missing child, an unknown operator or an empty command.
    """


class ShellTypeError(ShellError):
    """A tree made of values of the wrong type.
    """
