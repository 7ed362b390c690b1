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


"""request - token creation request validation

Turns the multipart 'data' field into a TokenRequest or raises
DataException before anything touches the ledger
"""

import json
import logging

from modules.address import Address
from modules.exceptions import DataException
from modules.metadata import MAX_NAME_LENGTH, MAX_SYMBOL_LENGTH

LOGGER = logging.getLogger(__name__)

DATA_FIELD = 'data'

U8_MAX = 2 ** 8 - 1
U64_MAX = 2 ** 64 - 1

INTEGER_KEYS = {'decimals': U8_MAX, 'supply': U64_MAX}
STRING_KEYS = {'walletAddress', 'tokenName', 'tokenSymbol', 'description'}
FLAG_KEYS = {'revokeMint', 'revokeFreeze', 'revokeUpdate'}
REQUEST_KEY_SET = set(INTEGER_KEYS) | STRING_KEYS | FLAG_KEYS


def scaled_supply(supply, decimals):
    """supply * 10^decimals, refusing anything beyond a u64 amount"""
    amount = supply * 10 ** decimals
    if amount > U64_MAX:
        raise DataException(
            "Supply {} with {} decimals overflows the token amount".format(
                supply, decimals))
    return amount


class TokenRequest(object):
    """Validated token creation parameters"""

    def __init__(
            self, decimals, supply, wallet_address, token_name,
            token_symbol, description,
            revoke_mint=False, revoke_freeze=False, revoke_update=False):
        self._decimals = decimals
        self._supply = supply
        self._wallet_address = wallet_address
        self._token_name = token_name
        self._token_symbol = token_symbol
        self._description = description
        self._revoke_mint = revoke_mint
        self._revoke_freeze = revoke_freeze
        self._revoke_update = revoke_update
        self._base_units = scaled_supply(supply, decimals)
        self._owner = Address.pubkey(wallet_address)

    @property
    def decimals(self):
        return self._decimals

    @property
    def supply(self):
        return self._supply

    @property
    def base_units(self):
        """Supply scaled by the decimal precision"""
        return self._base_units

    @property
    def wallet_address(self):
        return self._wallet_address

    @property
    def owner(self):
        return self._owner

    @property
    def token_name(self):
        return self._token_name

    @property
    def token_symbol(self):
        return self._token_symbol

    @property
    def description(self):
        return self._description

    @property
    def revoke_mint(self):
        return self._revoke_mint

    @property
    def revoke_freeze(self):
        return self._revoke_freeze

    @property
    def revoke_update(self):
        return self._revoke_update

    def __repr__(self):
        return 'TokenRequest({} {} x10^{} to {})'.format(
            self.token_symbol, self.supply, self.decimals,
            self.wallet_address)


def __validate_integer(key, value):
    # bool is an int subclass, json true must not pass as 1
    if isinstance(value, bool) or not isinstance(value, int):
        raise DataException("{} must be an integer".format(key))
    if value < 0 or value > INTEGER_KEYS[key]:
        raise DataException(
            "{} must be between 0 and {}".format(key, INTEGER_KEYS[key]))
    return value


def __validate_string(key, value):
    if not isinstance(value, str):
        raise DataException("{} must be a string".format(key))
    try:
        value.encode('utf-8')
    except UnicodeError:
        # json admits lone surrogates, utf-8 does not
        raise DataException("{} is not valid UTF-8 text".format(key))
    return value


def __validate_flag(key, value):
    if not isinstance(value, bool):
        raise DataException("{} must be true or false".format(key))
    return value


def __validate_length(key, value, limit):
    if len(value.encode('utf-8')) > limit:
        raise DataException(
            "{} must not exceed {} bytes".format(key, limit))
    return value


def token_request_from_dict(data):
    """Validate a decoded request object into a TokenRequest"""
    if not isinstance(data, dict):
        raise DataException("Request data must be a JSON object")
    if not REQUEST_KEY_SET <= data.keys():
        raise DataException(
            "Missing keys {}".format(
                ', '.join(sorted(REQUEST_KEY_SET - data.keys()))))
    integers = {k: __validate_integer(k, data[k]) for k in INTEGER_KEYS}
    strings = {k: __validate_string(k, data[k]) for k in STRING_KEYS}
    flags = {k: __validate_flag(k, data[k]) for k in FLAG_KEYS}
    __validate_length('tokenName', strings['tokenName'], MAX_NAME_LENGTH)
    __validate_length(
        'tokenSymbol', strings['tokenSymbol'], MAX_SYMBOL_LENGTH)
    if not Address.valid_address(strings['walletAddress']):
        raise DataException("Invalid user wallet address.")

    return TokenRequest(
        decimals=integers['decimals'],
        supply=integers['supply'],
        wallet_address=strings['walletAddress'],
        token_name=strings['tokenName'],
        token_symbol=strings['tokenSymbol'],
        description=strings['description'],
        revoke_mint=flags['revokeMint'],
        revoke_freeze=flags['revokeFreeze'],
        revoke_update=flags['revokeUpdate'])


def __field_content(field):
    """Multipart parts arrive as text, bytes or an uploaded file"""
    if hasattr(field, 'read'):
        field = field.read()
    if isinstance(field, bytes):
        try:
            field = field.decode('utf-8')
        except UnicodeDecodeError:
            raise DataException("'data' field is not valid UTF-8")
    return field


def token_request_from_multipart(fields):
    """Extract and validate the 'data' field of a multipart payload

    Args:
        fields: mapping of multipart field name to its content

    Returns:
        TokenRequest: the validated request

    Raises:
        DataException: field absent, malformed or out of range
    """
    field = fields.get(DATA_FIELD) if fields else None
    if field is None:
        raise DataException("Missing 'data' field in request.")
    try:
        data = json.loads(__field_content(field))
    except (ValueError, RecursionError) as e:
        raise DataException("Malformed 'data' field: {}".format(e))
    token_request = token_request_from_dict(data)
    LOGGER.debug("Validated %s", token_request)
    return token_request
