import configargparse
import os
import contextlib
import shutil
import tempfile
from io import open

import weaktrie.apptools

# The abbreviation "uth" is often used for this "unittesthelper"


def reset():
    delete_existing_parsers()
    weaktrie.apptools.resetcallbacks()


def delete_existing_parsers():
    """The singleton parsers supplied by configargparse
    don't play well with the test framework.
    This function will delete them so you are
    starting with a clean slate
    """
    configargparse._parsers = {}


def create_temp_config(tempdir, filename="weaktrie.conf", extralines=()):
    """User is responsible for removing the config file when
    they are finished
    """
    path = os.path.join(tempdir, filename)
    with open(path, "w") as ff:
        for line in extralines:
            ff.write(line + "\n")
    return path


class TempDirContext:
    """Create a temporary directory, change into it and remove it on exit."""

    def __init__(self, change_dir=True):
        self.change_dir = change_dir
        self.tmpdir = None
        self._origdir = None

    def __enter__(self):
        self.tmpdir = tempfile.mkdtemp(prefix="weaktrie-")
        if self.change_dir:
            self._origdir = os.getcwd()
            os.chdir(self.tmpdir)
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if self._origdir:
            os.chdir(self._origdir)
        shutil.rmtree(self.tmpdir, ignore_errors=True)


@contextlib.contextmanager
def EnvironmentContext(env_vars):
    """Context manager for temporarily setting environment variables."""
    original_values = {key: os.environ.get(key) for key in env_vars}
    os.environ.update(env_vars)

    try:
        yield
    finally:
        for key, value in original_values.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
