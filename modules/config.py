# ------------------------------------------------------------------------------
# Copyright 2018 Frank V. Castellucci and Arthur Greef
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ------------------------------------------------------------------------------


import json
import logging
import os

from yaml import safe_load, YAMLError
from solders.keypair import Keypair

from modules.exceptions import AuthException

LOGGER = logging.getLogger(__name__)

SOLMINT_CONFIG = None
ENVIRONMENT_KEYS_PATH = 'SOLMINT_KEYS'
ENVIRONMENT_CFGR_PATH = 'SOLMINT_CONFIG'
DEFAULT_KEYS_PATH = 'keys'
DEFAULT_CFGR_PATH = 'configs'
CFGR_FILE = 'solmint_config.yaml'

DEFAULT_CONFIG = {
    'rpc_url': 'https://api.devnet.solana.com',
    'commitment': 'confirmed',
    'wallet': 'server-wallet.json',
    'verbose': 1,
    'rest': {
        'host': '127.0.0.1',
        'port': 8080}}

COMMITMENT_LEVELS = frozenset(['processed', 'confirmed', 'finalized'])


class ServerAuthority(object):
    """The long lived server keypair

    Fee payer, initial mint, freeze and metadata update authority
    """
    __slots__ = ('_keypair',)

    def __init__(self, keypair):
        object.__setattr__(self, '_keypair', keypair)

    def __setattr__(self, name, value):
        raise AttributeError('ServerAuthority is immutable')

    @property
    def keypair(self):
        return self._keypair

    @property
    def pubkey(self):
        return self._keypair.pubkey()

    def __repr__(self):
        return 'ServerAuthority({})'.format(self.pubkey)


def solana_rpc_url(config=None):
    """Retrieve the solana rpc url"""
    return (config or load_solmint_config())['rpc_url']


def commitment_level(config=None):
    """Retrieve the commitment used for preflight and confirmation"""
    return (config or load_solmint_config())['commitment']


def rest_binding(config=None):
    """Retrieve (host, port) for the rest application"""
    rest = (config or load_solmint_config())['rest']
    return rest['host'], int(rest['port'])


def log_verbosity(config=None):
    """Retrieve the console verbosity of the rest server"""
    return (config or load_solmint_config())['verbose']


def wallet_path(config=None):
    """Retrieve the server wallet path, relative paths resolve to keys"""
    wallet = (config or load_solmint_config())['wallet']
    if os.path.isabs(wallet):
        return wallet
    return os.path.join(
        os.environ.get(ENVIRONMENT_KEYS_PATH, DEFAULT_KEYS_PATH), wallet)


def __read_keyfile(key_filename):
    try:
        with open(key_filename, 'r') as key_file:
            return json.load(key_file)
    except IOError as e:
        raise AuthException(
            'Unable to read key file: {}'.format(str(e)))
    except ValueError as e:
        raise AuthException(
            'Key file {} is not a keypair array: {}'.format(
                key_filename, str(e)))


def load_server_authority(key_filename):
    """Reads a solana keypair file (json array of 64 ints)

    Raises:
        AuthException: If the file is unreadable or not a keypair
    """
    raw = __read_keyfile(key_filename)
    if not isinstance(raw, list) or len(raw) != 64:
        raise AuthException(
            'Key file {} must hold 64 byte values'.format(key_filename))
    try:
        keypair = Keypair.from_bytes(bytes(raw))
    except (TypeError, ValueError) as e:
        raise AuthException(
            'Unable to create keypair from {}: {}'.format(
                key_filename, str(e)))
    LOGGER.info("Loaded server authority %s", keypair.pubkey())
    return ServerAuthority(keypair)


def fabricate_keypair_file(key_filename):
    """Write a new random keypair in solana keypair file format"""
    keypair = Keypair()
    with open(key_filename, 'w') as key_file:
        json.dump(list(bytes(keypair)), key_file)
    return keypair.pubkey()


def __merge(defaults, overrides):
    merged = dict(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = __merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def __load_cfg(configfile):
    """Reads the configuration file over the defaults"""
    LOGGER.info("Reading %s", configfile)
    try:
        with open(configfile, 'r') as f:
            doc = safe_load(f) or {}
    except FileNotFoundError:
        LOGGER.warning(
            "Could not find %s, using default configuration", configfile)
        return dict(DEFAULT_CONFIG)
    except YAMLError as e:
        raise ValueError('Malformed {}: {}'.format(configfile, e))
    config = __merge(DEFAULT_CONFIG, doc.get('solmint') or {})
    if config['commitment'] not in COMMITMENT_LEVELS:
        raise ValueError(
            'Unknown commitment {}'.format(config['commitment']))
    verbose = config['verbose']
    if isinstance(verbose, bool) or not isinstance(verbose, int) \
            or verbose < 0:
        raise ValueError('verbose must be a count, not {!r}'.format(verbose))
    return config


def load_solmint_config(configfile=None, reload=False):
    """Load the solmint configuration file

    Will check environment var for the configuration directory
    """
    global SOLMINT_CONFIG

    if SOLMINT_CONFIG and not reload and not configfile:
        return SOLMINT_CONFIG

    if not configfile:
        configfile = os.path.join(
            os.environ.get(ENVIRONMENT_CFGR_PATH, DEFAULT_CFGR_PATH),
            CFGR_FILE)

    SOLMINT_CONFIG = __load_cfg(configfile)
    return SOLMINT_CONFIG
