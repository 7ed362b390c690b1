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


from solders.pubkey import Pubkey
from spl.token.constants import ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_PROGRAM_ID

from modules.exceptions import DataException


class Address(object):
    """Address derivation for the token program family

    Every derivation is a pure function of its inputs
    """

    # Metaplex token metadata program
    METADATA_PROGRAM_ID = Pubkey.from_string(
        "metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s")
    TOKEN_PROGRAM_ID = TOKEN_PROGRAM_ID
    ASSOCIATED_TOKEN_PROGRAM_ID = ASSOCIATED_TOKEN_PROGRAM_ID

    METADATA_SEED = b"metadata"

    @classmethod
    def pubkey(cls, address):
        """Resolve a base58 string (or Pubkey) into a Pubkey"""
        if isinstance(address, Pubkey):
            return address
        if not isinstance(address, str) or not address:
            raise DataException("Invalid address {!r}".format(address))
        try:
            return Pubkey.from_string(address)
        except ValueError:
            raise DataException("Invalid address {}".format(address))

    @classmethod
    def valid_address(cls, address):
        try:
            cls.pubkey(address)
        except DataException:
            return False
        return True

    @classmethod
    def holding_address(cls, owner, mint):
        """Associated token account of owner for mint"""
        address, _ = Pubkey.find_program_address(
            [bytes(cls.pubkey(owner)),
             bytes(cls.TOKEN_PROGRAM_ID),
             bytes(cls.pubkey(mint))],
            cls.ASSOCIATED_TOKEN_PROGRAM_ID)
        return address

    @classmethod
    def metadata_address(cls, mint):
        """Metadata account of mint"""
        address, _ = Pubkey.find_program_address(
            [cls.METADATA_SEED,
             bytes(cls.METADATA_PROGRAM_ID),
             bytes(cls.pubkey(mint))],
            cls.METADATA_PROGRAM_ID)
        return address
