import os
import appdirs

CONFIG_FILENAME = "weaktrie.conf"


def default_config_directories(
    user_config_dir=None, system_config_dir=None, verbose=0
):
    """ Lowest priority first.  That is the order configargparse expects.
        system config < user config < current working directory
    """
    if user_config_dir is None:
        user_config_dir = appdirs.user_config_dir(appname="weaktrie")
    if system_config_dir is None:
        system_config_dir = appdirs.site_config_dir(appname="weaktrie")

    dirs = [system_config_dir, user_config_dir, os.getcwd()]
    if verbose >= 5:
        print("Config directories (lowest priority first):")
        for dd in dirs:
            print("\t" + dd)
    return dirs


def default_config_files(
    user_config_dir=None, system_config_dir=None, verbose=0
):
    """ Every weaktrie.conf that could exist.
        configargparse silently skips the missing ones.
    """
    return [
        os.path.join(dd, CONFIG_FILENAME)
        for dd in default_config_directories(
            user_config_dir=user_config_dir,
            system_config_dir=system_config_dir,
            verbose=verbose,
        )
    ]


def existing_config_files(
    user_config_dir=None, system_config_dir=None, verbose=0
):
    """ Only the default config files that are actually on disk """
    found = [
        cfg
        for cfg in default_config_files(
            user_config_dir=user_config_dir,
            system_config_dir=system_config_dir,
            verbose=verbose,
        )
        if os.path.isfile(cfg)
    ]
    if verbose >= 4:
        print(" ".join(["Found config files:"] + found))
    return found
