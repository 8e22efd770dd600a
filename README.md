# minishell

A small interactive shell for POSIX systems. It reads a line, splits it into
tokens, builds a pipeline of commands, expands variables and runs the result.
It has no dependencies outside the standard library.

## Features

- Pipelines with `|`
- Redirections: `<`, `>`, `>>` and here-documents with `<<`
- Single and double quotes, removed from arguments before a command runs
- `$NAME` and `$?` expansion outside single quotes, in the arguments of the
  first command of a line
- Commands are looked up through the `PATH` entry of the shell's environment,
  or run directly when their name contains `/`
- Builtins: `echo` (with `-n`), `cd`, `pwd`, `export`, `unset`, `env`, `exit`
- `SHLVL` is incremented on start-up; an invalid value is reset to `0`

## Installation

```
pip install .
```

## Usage

Start the shell:

```
minishell
```

The prompt is `minishell>`. For example:

```
minishell>echo hello | tr a-z A-Z > out.txt
minishell>cat << EOF
> first line
> EOF
minishell>exit 3
```

- End of input (Ctrl-D) at the prompt ends the shell with the last exit status.
- A line with an unclosed quote is reported (`erreur, il manque une quote`)
  and skipped.
- A redirection without a following word is a syntax error; the status
  becomes `2`.
- A here-document ends at the first line that starts with the delimiter; its
  body is not expanded. End of input inside one prints a warning.
- A builtin runs inside the shell only when it is alone on the line and has no
  redirections. Inside a pipeline or with redirections it works on a copy of
  the environment, so `cd`, `export` or `unset` there do not change the shell,
  and `exit` only ends that stage.
- `exit` with a non-numeric argument ends the shell with status `2`; with a
  number it ends with that number modulo 256; with more than one argument it
  reports `too many arguments` and returns `1`.

## Using it from Python

Each stage is its own module:

- `minishell.lexer`: `tokenize`, `count_tokens`, `Token`, `TokenType`,
  `UnclosedQuoteError`
- `minishell.parser`: `parse`, `Command`, `Redirection`, `RedirType`
- `minishell.environment`: `Environment`, `ShellState`
- `minishell.expander`: `expand_arguments`, `remove_quotes`, `env_lookup`
- `minishell.builtins`: `run_builtin`, the `builtin_*` functions, `ShellExit`
- `minishell.executor`: `execute`, `find_executable`, `prepare_heredocs`
- `minishell.cli`: `run_line`, `main`

```python
from minishell.lexer import tokenize
from minishell.parser import parse
from minishell.environment import ShellState
from minishell.cli import run_line

tokens = tokenize("ls -l | wc -l > count.txt")
commands = parse(tokens)

state = ShellState.from_environ(["PATH=/usr/bin:/bin", "HOME=/tmp"])
status = run_line("echo $HOME", state, input)
```

`run_line` passes `ShellExit` (raised by `exit`) on to the caller; its `code`
attribute holds the exit code.

## Limitations

The shell does not handle signals such as Ctrl-C specially, and it has no
command lists (`;`, `&&`, `||`), globbing, subshells or job control. Variables
in the arguments of the second and later commands of a pipeline are not
expanded, and the command name itself is never expanded.

## Running the tests

```
pip install .[test]
pytest
```