import sys
import shutil
import configargparse

from weaktrie.version import __version__
import weaktrie.configutils


def add_base_arguments(cap):
    cap.add(
        "-v",
        "--verbose",
        help="Output verbosity. Add more v's to make it more verbose",
        action="count",
        default=0,
    )
    cap.add(
        "-q",
        "--quiet",
        help="Decrement verbosity. Useful in apps where the default verbosity > 0.",
        action="count",
        default=0,
    )
    cap.add("--version", action="version", version=__version__)
    cap.add("-?", action="help", help="Help")


def add_flag_argument(parser, name, dest=None, default=False, help=None):
    """ Add a flag argument to an ArgumentParser instance.
        Either the --flag is present or the --no-flag is present.
    """
    if not dest:
        dest = name.replace("-", "_")
    group = parser.add_mutually_exclusive_group()
    bool_help = help + " Use --no-" + name + " to turn the feature off."
    group.add_argument(
        "--" + name, dest=dest, default=default, action="store_true", help=bool_help
    )
    group.add_argument(
        "--no-" + name, dest=dest, action="store_false", default=not default
    )


def create_parser(description, include_config=True):
    """ A configargparse parser with the common weaktrie arguments.
        Values are taken from (highest priority first)
        command line > WEAKTRIE_* environment variables > config files > defaults
    """
    if include_config:
        default_config_files = weaktrie.configutils.default_config_files()
    else:
        default_config_files = []

    cap = configargparse.ArgumentParser(
        description=description,
        formatter_class=configargparse.ArgumentDefaultsHelpFormatter,
        auto_env_var_prefix="WEAKTRIE_",
        default_config_files=default_config_files,
        args_for_setting_config_path=["-c", "--config"] if include_config else [],
        ignore_unknown_config_file_keys=True,
        add_help=True,
    )
    add_base_arguments(cap)
    return cap


def _commonsubstitutions(args):
    args.verbose -= args.quiet


# List to store the callback functions for parse args
_substitutioncallbacks = [_commonsubstitutions]


def resetcallbacks():
    """ Useful in tests to clear out the substitution callbacks """
    global _substitutioncallbacks
    _substitutioncallbacks = [_commonsubstitutions]


def registercallback(callback):
    """ Use this to register a function to be called back during the
        substitutions call (usually during parseargs).
        The callback function will later be given "args" as its argument.
    """
    _substitutioncallbacks.append(callback)


def substitutions(args, verbose=None):
    for func in _substitutioncallbacks:
        func(args)

    if verbose is None:
        verbose = args.verbose

    if verbose >= 2:
        verbose_print_args(args)


def parseargs(cap, argv=None, verbose=None):
    args = cap.parse_args(args=argv)
    substitutions(args, verbose)
    return args


def terminalcolumns():
    """ How many columns in the text terminal """
    return shutil.get_terminal_size(fallback=(80, 24)).columns


def verbose_print_args(args, file=None):
    """ Print the args in two columns Attr: Value """
    if file is None:
        file = sys.stdout

    print("\nFinal aggregated variables:", file=file)
    maxattrlen = max((len(attr) for attr in vars(args)), default=0)
    fmt = "".join(["{0:", str(maxattrlen + 1), "}: {1}"])
    rightcolbegin = maxattrlen + 3
    if terminalcolumns() <= rightcolbegin:
        print("Verbose print of args aborted due to small terminal size!", file=file)
        return

    for attr, value in sorted(vars(args).items()):
        print(fmt.format(attr, "" if value is None else value), file=file)
