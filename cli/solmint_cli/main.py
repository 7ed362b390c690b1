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


import argparse
import json
import logging
import os
import sys
import traceback
from importlib.metadata import version as distribution_version
from importlib.metadata import PackageNotFoundError

import yaml

from modules.address import Address
from modules.config import (
    load_solmint_config, load_server_authority, fabricate_keypair_file,
    wallet_path, solana_rpc_url, commitment_level)
from modules.exceptions import CliException, SolmintException
from modules.logs import setup_loggers
from modules.request import token_request_from_dict
from shared.ledger_client import Ledger
from shared.token import create_token_from_request, success_response

from solmint_cli.cliparser import create_solmint_cli_parser

DISTRIBUTION_NAME = 'solmint'

LOGGER = logging.getLogger(__name__)


def _print_result(result, fmt):
    if fmt == 'json':
        print(json.dumps(result, indent=2, sort_keys=True))
    elif fmt == 'yaml':
        print(yaml.dump(result, default_flow_style=False)[0:-1])
    else:
        for key, value in result.items():
            print('{}: {}'.format(key, value))


def _read_request(request_filename):
    """Reads the json token request file.

    Raises:
        CliException: If unable to read or decode the file.
    """
    try:
        with open(request_filename, 'r') as request_file:
            return json.load(request_file)
    except IOError as e:
        raise CliException('Unable to read request file: {}'.format(str(e)))
    except ValueError as e:
        raise CliException(
            'Request file {} is not valid json: {}'.format(
                request_filename, str(e)))


def _do_create(args):
    """Executes the 'create' subcommand.

    Runs the request file through validation, planning, signing and
    submission against the configured or given rpc endpoint.
    """
    data = _read_request(args.request)
    try:
        token_request = token_request_from_dict(data)
        authority = load_server_authority(args.wallet or wallet_path())
        ledger = Ledger(args.url or solana_rpc_url(), commitment_level())
        created = create_token_from_request(token_request, authority, ledger)
    except SolmintException as e:
        raise CliException(str(e))
    _print_result(
        success_response(created.token_address, created.transaction_id),
        args.format)


def _do_address(args):
    """Executes the 'address' subcommand."""
    try:
        result = {
            'holding': str(Address.holding_address(args.owner, args.mint)),
            'metadata': str(Address.metadata_address(args.mint))}
    except SolmintException as e:
        raise CliException(str(e))
    _print_result(result, args.format)


def _do_keygen(args):
    """Executes the 'keygen' subcommand."""
    if os.path.exists(args.output) and not args.force:
        raise CliException(
            '{} exists, use --force to overwrite'.format(args.output))
    try:
        pubkey = fabricate_keypair_file(args.output)
    except IOError as e:
        raise CliException('Unable to write key file: {}'.format(str(e)))
    print('wrote {} for {}'.format(args.output, pubkey))


def create_parent_parser(prog_name):
    parent_parser = argparse.ArgumentParser(prog=prog_name, add_help=False)
    parent_parser.add_argument(
        '-v', '--verbose',
        action='count',
        help='enable more verbose output')

    try:
        version = distribution_version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        version = 'UNKNOWN'

    parent_parser.add_argument(
        '-V', '--version',
        action='version',
        version=(DISTRIBUTION_NAME + ' (Solana token minting) version {}')
        .format(version),
        help='display version information')

    return parent_parser


def main(prog_name=os.path.basename(sys.argv[0]), args=None,
         with_loggers=True):
    parser = create_solmint_cli_parser(create_parent_parser(prog_name))
    if args is None:
        args = sys.argv[1:]
    args = parser.parse_args(args)

    if with_loggers is True:
        if args.verbose is None:
            verbose_level = 0
        else:
            verbose_level = args.verbose
        setup_loggers(verbose_level=verbose_level)

    if args.cmd == 'create':
        load_solmint_config()
        _do_create(args)
    elif args.cmd == 'address':
        _do_address(args)
    elif args.cmd == 'keygen':
        _do_keygen(args)
    else:
        raise CliException(
            '"{}" is not a valid subcommand of "solmint"'.format(args.cmd))


def main_wrapper():
    try:
        main()
    except CliException as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        pass
    except BrokenPipeError:
        sys.stderr.close()
    except SystemExit as e:
        raise e
    except Exception:
        traceback.print_exc(file=sys.stderr)
        sys.exit(1)
