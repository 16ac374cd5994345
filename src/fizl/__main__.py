## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# fizl — A small Tcl-like command language, embeddable, where every value is text.
#

import sys
import time
import traceback
from pathlib import Path
from dataclasses import dataclass

import click

from .types import Code
from .parser import is_complete
from .formatting import write_without_ansi, format_failure, show_result

from . import api


@dataclass(frozen=True)
class RuntimeConfig:
    verbose: int
    floating: bool
    ignore: bool
    stats: bool
    plain: bool


@dataclass
class ExecutionItem:
    source: str
    filename: str


class FizRunner:
    def __init__(self, config: RuntimeConfig):
        self.ignore = config.ignore
        self.stats_enabled = config.stats
        self.plain = config.plain

        if self.plain:
            writer = write_without_ansi(sys.stdout.write)
            sys.stdout.write, sys.stderr.write = writer, writer

        self.interp = api.create(floating=config.floating, verbosity=config.verbose)
        if self.interp is None:
            raise click.ClickException("Unable to allocate an interpreter.")
        self.start_time = time.time() if self.stats_enabled else None
        self.failure = False
        self.executed_items = 0

    def _report_failure(self, code: Code, filename: str, is_repl: bool = False) -> None:
        print(format_failure(code, self.interp.result, self.interp.last_statement(), filename), file=sys.stderr)
        if not is_repl and not self.ignore: sys.exit(1)

    def _report_exception(self, exc: Exception, filename: str, is_repl: bool = False) -> None:
        command = getattr(exc, 'fiz_command', None) or '?'
        print(f'\033[30;43m RUNTIME ERROR. \033[0m Command \033[1;97m`{command}`\033[0m from `\033[97m{filename}\033[0m` '
              f'raised an exception! (Exception: \033[33m{type(exc).__name__}\033[0m)', file=sys.stderr)
        tb_lines = traceback.format_exception(exc, chain=False)
        print(''.join(line for line in tb_lines if "src/fizl/" not in line).rstrip(), file=sys.stderr)
        if not is_repl and not self.ignore: sys.exit(1)

    def execute_items(self, items: list[ExecutionItem]) -> None:
        for item in items:
            self._execute_script(item.source, item.filename)

    def _execute_script(self, source: str, filename: str, print_result: bool = False) -> None:
        try:
            code = self.interp.execute(source)
        except Exception as exc:
            self.failure = True
            self._report_exception(exc, filename)
            return

        # A `return` at the top level simply ends the script early.
        if code in (Code.OK, Code.RETURN):
            self.executed_items += 1
            if print_result: print(self.interp.result)
        else:
            self.failure = True
            self._report_failure(code, filename)

    def repl(self) -> None:
        if sys.platform != "win32": import readline

        print('fizl - Tcl-like command language REPL; type Ctrl+D to exit.')
        source = ""

        while True:
            try:
                prompt = "\033[36m>>> \033[0m" if not source else "\033[36m... \033[0m"
                line = input(prompt)
                if not source and line.strip() in ('quit', 'exit'): break
                source += line + "\n"
                if not is_complete(source): continue

                try:
                    code = self.interp.execute(source)
                    show_result(code, self.interp.result)
                except Exception as exc:
                    self._report_exception(exc, '<REPL>', is_repl=True)
                source = ""

            except (KeyboardInterrupt, EOFError):
                print(""); break

    def finalize(self) -> int:
        if self.start_time is not None and self.executed_items > 0:
            elapsed_time = time.time() - self.start_time
            print(f"\n\033[97m\033[48;5;30m STATISTICS. \033[0m")
            print(f"statements\t\033[97m{self.interp.steps:,}\033[0m")
            print(f"time\t\t\033[97m{elapsed_time:.3f}s\033[0m")
        return 1 if self.failure else 0


def _parse_dev_tokens(tokens: list[str]) -> list[tuple[str, Path | str | None]]:
    """Ordered scripts, inline commands and REPL sessions requested on the `run-dev` command line."""
    actions: list[tuple[str, Path | str | None]] = []
    stream = iter(tokens)
    for token in stream:
        option, equals, value = token.partition('=')
        match option:
            case '--':
                continue
            case '-c' | '--command':
                if not equals and (value := next(stream, None)) is None:
                    raise click.BadParameter("Missing inline script after -c/--command option.")
                if value == '':
                    raise click.BadParameter("Empty script supplied to command option.")
                actions.append(('command', value))
            case '-r' | '--repl':
                actions.append(('repl', None))
            case _ if token.startswith('-'):
                raise click.BadParameter(f"Unknown option `{token}`.")
            case _:
                if not (path := Path(token)).is_file():
                    raise click.BadParameter(f"Script `{token}` not found.")
                actions.append(('file', path))
    return actions


@click.group(invoke_without_command=True)
@click.option('--verbose', '-v', default=0, count=True, help='Print statements as they execute (twice for nested ones too).')
@click.option('--float', 'floating', is_flag=True, help='Evaluate `expr` with floating-point numbers instead of integers.')
@click.option('--ignore', '-i', is_flag=True, help='Ignore errors and continue executing.')
@click.option('--stats', is_flag=True, help='Display execution statistics (e.g., number of statements).')
@click.option('--plain', '-p', is_flag=True, help='Strip ANSI color codes and redirect stderr to stdout.')
@click.pass_context
def cli(ctx: click.Context, verbose: int, floating: bool, ignore: bool, stats: bool, plain: bool) -> None:
    ctx.ensure_object(dict)
    ctx.obj['config'] = RuntimeConfig(verbose=verbose, floating=floating, ignore=ignore, stats=stats, plain=plain)


@cli.command('run-file')
@click.argument('script', type=click.File('r', encoding='utf-8'))
@click.pass_context
def run_file(ctx: click.Context, script) -> None:
    runner = FizRunner(ctx.obj['config'])
    runner.execute_items((ExecutionItem(script.read(), script.name or '<STDIN>'),))
    ctx.exit(runner.finalize())


@cli.command('run-dev', context_settings={'ignore_unknown_options': True, 'allow_extra_args': True})
@click.argument('tokens', nargs=-1)
@click.pass_context
def run_dev(ctx: click.Context, tokens: tuple[str, ...]) -> None:
    runner = FizRunner(ctx.obj['config'])
    actions = _parse_dev_tokens(list(tokens)) or [('repl', None)]

    inline = (f'<INPUT_{i}>' for i in range(1, len(actions) + 1))
    for action, payload in actions:
        match action:
            case 'file':
                runner.execute_items((ExecutionItem(payload.read_text(encoding='utf-8'), str(payload)),))
            case 'command':
                runner._execute_script(payload, next(inline), print_result=True)
            case 'repl':
                runner.repl()
    ctx.exit(runner.finalize())


@cli.command('run-repl')
@click.pass_context
def run_repl(ctx: click.Context) -> None:
    runner = FizRunner(ctx.obj['config'])
    runner.repl()
    ctx.exit(runner.finalize())


_GLOBAL_FLAGS = ('--float', '--ignore', '--stats', '--plain', '--verbose', '-i', '-p')

def _is_global_flag(token: str) -> bool:
    return token in _GLOBAL_FLAGS or (token.startswith('-v') and set(token[1:]) == {'v'})


def main(argv: list[str] | None = None) -> None:
    """Route `fizl script.fiz`, `fizl < script.fiz`, `fizl -c CMD ...` and plain `fizl` to a subcommand."""
    args = list(sys.argv[1:] if argv is None else argv)
    flags = [t for t in args if _is_global_flag(t)]
    rest = [t for t in args if not _is_global_flag(t)]

    match rest:
        case []:
            # Piped input runs as a script, a terminal gets the REPL.
            cmd, tail = ('run-file', ['-']) if not sys.stdin.isatty() else ('run-repl', [])
        case ['-']:
            cmd, tail = 'run-file', ['-']
        case ['-r' | '--repl']:
            cmd, tail = 'run-repl', []
        case [path] if not path.startswith('-') and Path(path).is_file():
            cmd, tail = 'run-file', [path]
        case _:
            cmd, tail = 'run-dev', rest

    cli.main(args=[*flags, cmd, *tail], prog_name='fizl')


if __name__ == "__main__":
    main()
