"""
Configuration file handling.  The configuration is a json (or yaml)
dict of sections:

    {
        "default": {
            "carddav_url": "https://dav.example.com/addressbooks/me/default/",
            "carddav_username": "me",
            "carddav_password": "secret"
        },
        "sogo": {
            "inherits": "default",
            "carddav_url": "https://sogo.example.com/SOGo/dav/me/Contacts/personal/",
            "quirks": {"unparseable-content-types": ["text/x-vlist"]}
        }
    }
"""

import json
import logging
import os
from fnmatch import fnmatch

log = logging.getLogger(__name__)

CONNECTION_KEYS = {
    "carddav_url": "url",
    "carddav_username": "username",
    "carddav_password": "password",
    "carddav_ssl_verify_cert": "verify_ssl",
    "carddav_timeout": "timeout",
}


def _is_glob(name):
    return not set(name).isdisjoint("[*?")


def expand_config_section(config, section="default", blacklist=None):
    """
    Resolve a section name into the list of concrete sections it stands
    for, in config file order and without duplicates.

    * "*" gives all sections in the config file
    * a glob pattern (work_*) gives the matching sections
    * a "meta" section with the keyword "contains" gives the sections
      listed there, recursively and possibly through glob patterns

    Sections with "disable" set are left out.  A section that does not
    exist is returned as it is, config_section() gives an empty dict
    for it.
    """
    if blacklist is None:
        blacklist = set()
    if _is_glob(section):
        names = [x for x in config if fnmatch(x, section)]
    else:
        names = [section]

    results = []
    for name in names:
        section_config = config.get(name, {})
        if name in blacklist or section_config.get("disable", False):
            continue
        if "contains" in section_config:
            ## blacklisted, so that a meta section containing itself
            ## (directly or through a pattern) terminates
            blacklist.add(name)
            expanded = []
            for subsection in section_config["contains"]:
                expanded.extend(expand_config_section(config, subsection, blacklist))
        else:
            expanded = [name]
        for x in expanded:
            if x not in results:
                results.append(x)
    return results


def config_section(config, section="default"):
    if section in config and "inherits" in config[section]:
        ret = config_section(config, config[section]["inherits"])
    else:
        ret = {}
    if section in config:
        ret.update(config[section])
    return ret


def read_config(fn, interactive_error=False):
    if not fn:
        cfgdir = f"{os.environ.get('HOME', '/')}/.config/"
        for config_file in (
            f"{cfgdir}/carddav/addressbook.conf",
            f"{cfgdir}/carddav/addressbook.yaml",
            f"{cfgdir}/carddav/addressbook.json",
            "/etc/carddav/addressbook.conf",
        ):
            cfg = read_config(config_file)
            if cfg:
                return cfg
        return None

    try:
        try:
            with open(fn, "rb") as config_file:
                return json.load(config_file)
        except json.decoder.JSONDecodeError:
            ## pyyaml comes with the "yaml" extra only
            try:
                import yaml

                try:
                    with open(fn, "rb") as config_file:
                        return yaml.load(config_file, yaml.SafeLoader)
                except yaml.YAMLError:
                    log.error(
                        f"config file {fn} exists but is neither valid json nor yaml.  Check the syntax."
                    )
            except ImportError:
                log.error(
                    f"config file {fn} exists but is not valid json, and pyyaml is not installed."
                )

    except FileNotFoundError:
        log.info("no config file found")
    except ValueError:
        if interactive_error:
            log.error(
                "error in config file.  Be aware that the interactive configuration will ignore and overwrite the current broken config file",
                exc_info=True,
            )
        else:
            log.error("error in config file.  It will be ignored", exc_info=True)
    return {}


def connection_params(section_config):
    """
    Translate a config section into AsyncCardDAVClient keyword
    arguments.  CARDDAV_URL, CARDDAV_USERNAME and CARDDAV_PASSWORD in the
    environment take precedence over the file.
    """
    params = {}
    for key, param in CONNECTION_KEYS.items():
        if key in section_config:
            params[param] = section_config[key]
    for env_key in ("url", "username", "password"):
        value = os.environ.get(f"CARDDAV_{env_key.upper()}")
        if value:
            params[env_key] = value
    if "quirks" in section_config:
        params["quirks"] = section_config["quirks"]
    if isinstance(params.get("verify_ssl"), str):
        params["verify_ssl"] = params["verify_ssl"].lower() not in ("no", "false", "0")
    if "timeout" in params:
        params["timeout"] = float(params["timeout"])
    return params


def _client_for_section(config, section, **kwargs):
    from carddav.client import AsyncCardDAVClient

    params = connection_params(config_section(config, section))
    params.update(kwargs)
    if not params.get("url"):
        raise ValueError(
            f"no carddav_url in section {section} of the configuration, and CARDDAV_URL is not set"
        )
    return AsyncCardDAVClient(**params)


def client_from_config(fn=None, section="default", **kwargs):
    """
    Build an AsyncCardDAVClient from a configuration file section.
    Extra keyword arguments are passed on to the client and win over
    the configuration.

    Raises ValueError if no URL is configured.
    """
    config = read_config(fn) or {}
    return _client_for_section(config, section, **kwargs)


def clients_from_config(fn=None, section="*", **kwargs):
    """
    One AsyncCardDAVClient per section that section expands to (see
    expand_config_section), in config file order.  Keyword arguments
    are passed on to every client.
    """
    config = read_config(fn) or {}
    return [
        _client_for_section(config, name, **kwargs)
        for name in expand_config_section(config, section)
    ]
