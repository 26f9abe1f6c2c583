# minishell

A small interactive shell. It reads lines at a `minishell$ ` prompt, splits
them into tokens, builds a syntax tree and runs it.

## Features

- Words separated by spaces; a token that starts with a single or double
  quote runs to the matching quote, and the quoted text (without the quotes)
  becomes one word
- Pipelines: `ls | grep py | wc -l`
- Redirections: `<`, `>`, `>>` and heredocs with `<<` (`>>` and `<<` must be
  followed by a space)
- Logical operators: `&&` runs the right side after success, `||` after failure
- Variable expansion: `$NAME` and `$?` (exit status of the last command);
  unset variables expand to nothing
- Builtins: `echo` (with `-n`), `cd` (with `-` for `$OLDPWD` and no argument
  for `$HOME`), `pwd`, `export NAME=value`, `unset`, `env` and `exit`
- External commands, run directly when the name is an executable path and
  otherwise looked up along `PATH`; an unknown command gives status 127

## Installation

```
pip install .
```

## Usage

Start the shell:

```
minishell
```

Then type commands:

```
minishell$ export GREETING=hello
minishell$ echo $GREETING world > out.txt
minishell$ cat < out.txt | wc -c && echo done
```

Leave with `exit`, optionally giving a numeric status; a value outside 0..255
or a non-numeric argument leaves with status 0. End of input (Ctrl-D) also
leaves, with the status of the last command. Ctrl-C at the prompt starts a
fresh line.

Each command of a pipeline runs with its own copy of the environment, so
`export`, `unset` or `cd` inside a pipeline do not change the shell.

## Using it from Python

```python
from minishell.state import ShellState
from minishell.cli import run_line

state = ShellState.from_environ({"PATH": "/usr/bin:/bin", "HOME": "/tmp"})
status = run_line("echo hello && pwd", state)
```

`run_line` reports syntax errors on the state's error stream and returns the
last status; the `exit` builtin raises `minishell.builtins.ShellExit`.

The pieces can also be used on their own:

- `minishell.tokens.tokenize` turns a line into `Token` objects and raises
  `ShellSyntaxError` on unclosed quotes or misplaced `>`/`>>`/`<<`
- `minishell.parser.parse` (or `parse_line` for text) builds a tree of
  `minishell.ast.Node` objects; `minishell.ast.format_ast` renders it
- `minishell.expansion.expand_word` expands `$NAME` and `$?` in a string
- `minishell.environment.Environment` holds `NAME=value` entries
- `minishell.executor.execute` runs a tree against a `ShellState`

## What it does not do

There is no globbing, no `;` separator, no parentheses or subshells, no
background jobs, no quote handling inside a word, and no `export` without a
value. Words are split on spaces only, not tabs.

## Running the tests

```
pip install .[test]
pytest
```