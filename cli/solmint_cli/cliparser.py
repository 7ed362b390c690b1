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

_formatOptions = ['default', 'json', 'yaml']

_createCmdMap = {
    '-f': {
        'help': 'json file holding the token request (required)',
        'required': True,
        'dest': 'request'},
    '-w': {
        'help': 'server wallet keypair file, default from configuration',
        'default': None,
        'dest': 'wallet'},
    '-u': {
        'help': 'solana rpc url, default from configuration',
        'default': None,
        'dest': 'url'},
    '--format': {
        'help': "format output to type, default is 'default'",
        'default': 'default',
        'choices': _formatOptions,
        'dest': 'format'}}

_addressCmdMap = {
    '-o': {
        'help': 'wallet address owning the holding (required)',
        'required': True,
        'dest': 'owner'},
    '-m': {
        'help': 'token mint address (required)',
        'required': True,
        'dest': 'mint'},
    '--format': {
        'help': "format output to type, default is 'default'",
        'default': 'default',
        'choices': _formatOptions,
        'dest': 'format'}}

_keygenCmdMap = {
    '-o': {
        'help': 'keypair file to write (required)',
        'required': True,
        'dest': 'output'},
    '--force': {
        'help': 'overwrite an existing keypair file',
        'action': 'store_true',
        'dest': 'force'}}

_cmdmap = {
    'create': {
        'help': 'create, mint and describe a token from a request file',
        'child': _createCmdMap},
    'address': {
        'help': 'show the holding and metadata addresses of a mint',
        'child': _addressCmdMap},
    'keygen': {
        'help': 'generate a server wallet keypair file',
        'child': _keygenCmdMap}}


def __gensub(subprs, subcnd, nblock):
    """
    Private function to imbue the commands and associated
    options
    """
    nblock = dict(nblock)
    child = nblock.pop('child')
    p = subprs.add_parser(subcnd, **nblock)
    for arg, kwds in child.items():
        p.add_argument(arg, **kwds)


def create_solmint_cli_parser(parent_parser):
    """
    Creates the command line parser from the
    parent_parser and sets up all the options
    """

    parser = argparse.ArgumentParser(
        description='Provides commands to create tokens, '
        'derive token addresses and generate server wallets.',
        usage='%(prog)s [-h] [create | address | keygen] '
        '[subcommand arguments]',
        parents=[parent_parser])

    subparse = parser.add_subparsers(
        title='commands',
        dest='cmd',
        description='valid subcommands')

    [__gensub(subparse, k, v)
        for k, v in _cmdmap.items()]

    return parser
