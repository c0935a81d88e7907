#!/usr/bin/env python

import argparse
import importlib
import pkgutil
import sys


_HELP = {
    'describe_problem': 'Print a pick or place problem description',
}


def get_available_apps():
    """Map command names to app modules that define ``main``."""
    package = importlib.import_module('pnp_trajopt.apps')
    apps = {}
    for info in sorted(pkgutil.iter_modules(package.__path__),
                       key=lambda m: m.name):
        if info.name == 'cli':
            continue
        module_name = 'pnp_trajopt.apps.' + info.name
        try:
            module = importlib.import_module(module_name)
        except ImportError:
            continue
        if not hasattr(module, 'main'):
            continue
        command = info.name.replace('_', '-')
        apps[command] = {
            'module': module_name,
            'help': _HELP.get(info.name, 'Run {}'.format(command)),
        }
    return apps


def run_app(module_name, argv):
    # subcommands parse sys.argv themselves
    sys.argv = argv
    importlib.import_module(module_name).main()


def main():
    parser = argparse.ArgumentParser(
        prog='pnpt',
        description='pnp-trajopt command line tools')
    subparsers = parser.add_subparsers(dest='command',
                                       help='Available commands')
    apps = get_available_apps()
    for command, app in apps.items():
        subparsers.add_parser(command, help=app['help'], add_help=False)

    args, unknown = parser.parse_known_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)
    run_app(apps[args.command]['module'], [args.command] + unknown)


if __name__ == '__main__':
    main()
