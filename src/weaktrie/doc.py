import os
from io import open

from rich.console import Console
from rich_rst import RestructuredText

import weaktrie.apptools

README = "README.weaktrie-doc.rst"


def readme_path():
    return os.path.join(os.path.dirname(os.path.realpath(__file__)), README)


def read_manual():
    with open(readme_path(), encoding="utf-8") as ff:
        return ff.read()


def main(argv=None, console=None):
    cap = weaktrie.apptools.create_parser(
        "Documentation tool", include_config=False
    )
    cap.add("--raw", action="store_true", help="Print the reStructuredText source")
    args = weaktrie.apptools.parseargs(cap, argv)

    if console is None:
        console = Console()

    text = read_manual()
    if args.raw:
        console.print(text, markup=False, highlight=False)
    else:
        console.print(RestructuredText(text))
    return 0
