import argparse
import logging
import sys

from lesscompiler.compiler import LessCompiler
from lesscompiler.exceptions import InitializationError, LessError


__all__ = ('CommandError', 'GenericArgparseImplementation', 'main', 'run',)


class CommandError(Exception):
    pass


class GenericArgparseImplementation(object):
    """Command line utility to compile a LESS file.

    With only an input file, the CSS is written to stdout. Given an
    output file as well, the CSS is written there, but only if the output
    is out of date, unless ``--force`` is used.
    """

    def __init__(self, log=None, prog=None, stdout=None):
        self.log = log
        self.stdout = stdout
        self._construct_parser(prog)

    def _construct_parser(self, prog=None):
        self.parser = parser = argparse.ArgumentParser(
            description="Compile LESS to CSS.", prog=prog)
        parser.add_argument("-v", dest="verbose", action="store_true",
            help="be verbose")
        parser.add_argument("-q", action="store_true", dest="quiet",
            help="be quiet")
        parser.add_argument('input', metavar='INPUT',
            help='The LESS file to compile.')
        parser.add_argument('output', metavar='OUTPUT', nargs='?',
            help='Write the CSS to this file instead of stdout.')
        parser.add_argument('--compress', '-x', action='store_true',
            default=None, help='Compress the generated CSS.')
        parser.add_argument('--force', '-f', action='store_true',
            help='Compile even if OUTPUT is up to date.')
        parser.add_argument('--encoding',
            help='Character encoding of OUTPUT.')

    def run_with_argv(self, argv):
        try:
            ns = self.parser.parse_args(argv)
        except SystemExit:
            # We do not want the main() function to exit the program.
            # See run() instead.
            return 1

        # Setup logging
        if self.log:
            log = self.log
        else:
            log = logging.getLogger('lesscompiler')
            log.setLevel(logging.DEBUG if ns.verbose else (
                logging.WARNING if ns.quiet else logging.INFO))
            if not log.handlers:
                log.addHandler(logging.StreamHandler())

        compiler = LessCompiler(compress=ns.compress, encoding=ns.encoding)
        try:
            if ns.output:
                if compiler.compile_to(ns.input, ns.output, force=ns.force):
                    log.info('Wrote %s', ns.output)
            else:
                (self.stdout or sys.stdout).write(
                    compiler.compile_file(ns.input))
        except (LessError, InitializationError) as e:
            log.error('Failed, error was: %s', e)
            return 1
        except (IOError, OSError) as e:
            raise CommandError(e)
        finally:
            compiler.close()
        return 0

    def main(self, argv):
        """Parse the given command line.

        The command line is expected to NOT include what would be
        sys.argv[0].
        """
        try:
            return self.run_with_argv(argv)
        except CommandError as e:
            print(e, file=sys.stderr)
            return 1


def main(argv, log=None):
    """Execute the command line interface with ``argv``, returning the
    exit code.
    """
    return GenericArgparseImplementation(log=log).main(argv)


def run():
    sys.exit(main(sys.argv[1:]) or 0)
