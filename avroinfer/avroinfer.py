"""

Command line utility to infer Avro schemas from Python types and Parquet files.

"""


import argparse
import json
import os
import sys
from avroinfer import _version

ARG_TYPES = {
    'str': str,
    'int': int,
}


def load_commands():
    """Load the commands from the commands.json file."""
    commands_path = os.path.join(os.path.dirname(__file__), 'commands.json')
    with open(commands_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def create_subparsers(subparsers, commands):
    """Create subparsers for the commands."""
    for command in commands:
        cmd_parser = subparsers.add_parser(command['command'], help=command['description'])
        for arg in command['args']:
            kwargs = {
                'help': arg['help'],
            }
            if 'default' in arg:
                kwargs['default'] = arg['default']
            if arg['type'] == 'bool':
                kwargs['action'] = 'store_true'
            else:
                kwargs['type'] = ARG_TYPES[arg['type']]
            carg = cmd_parser.add_argument(arg['name'], **kwargs)
            if arg['name'].startswith('--'):
                carg.required = arg.get('required', True)


def dynamic_import(module, func):
    """Dynamically import a module and function."""
    mod = __import__(module, fromlist=[func])
    return getattr(mod, func)


def build_function_args(command, args):
    """Map parsed arguments onto the keyword arguments of the command's function."""
    func_args = {}
    for arg, source in command['function']['args'].items():
        if source == 'output_file_path':
            func_args[arg] = getattr(args, 'out', None) or ''
        elif source.startswith('args.'):
            if hasattr(args, source[5:]):
                func_args[arg] = getattr(args, source[5:])
        else:
            func_args[arg] = source
    return func_args


def main():
    """Main function for the command line utility."""
    commands = load_commands()
    parser = argparse.ArgumentParser(description='Infer Avro schemas from Python types and Parquet files.')
    parser.add_argument('--version', action='store_true', help='Print the version of avroinfer.')

    subparsers = parser.add_subparsers(dest='command')
    create_subparsers(subparsers, commands)

    args = parser.parse_args()

    if 'version' in args and args.version:
        print(f'avroinfer {_version.version}')
        return

    if args.command is None:
        parser.print_help()
        return

    try:
        command = next((cmd for cmd in commands if cmd['command'] == args.command), None)
        if not command:
            print(f"Error: Command {args.command} not found.")
            sys.exit(1)

        module_name, func_name = command['function']['name'].rsplit('.', 1)
        func = dynamic_import(module_name, func_name)
        func_args = build_function_args(command, args)
        if func_args.get('avro_file_path'):
            print(f'Executing {command["description"]} with input {args.input} and output {func_args["avro_file_path"]}')
        func(**func_args)

    except Exception as e:
        print("Error: ", str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
