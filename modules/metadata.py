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


"""metadata - Metaplex token metadata instruction

Layout and instruction for CreateMetadataAccountV3, the only metadata
program instruction the token pipeline issues
"""

from construct import (
    Bytes, Const, Flag, If, Int8ul, Int16ul, Int32ul,
    PascalString, PrefixedArray, Struct, this)
from solders.instruction import AccountMeta, Instruction
from solders.system_program import ID as SYS_PROGRAM_ID

from modules.address import Address
from modules.exceptions import DataException

CREATE_METADATA_ACCOUNT_V3 = 33

MAX_NAME_LENGTH = 32
MAX_SYMBOL_LENGTH = 10
MAX_URI_LENGTH = 200
MAX_CREATOR_SHARE = 100

BORSH_STRING = PascalString(Int32ul, "utf8")

CREATOR_LAYOUT = Struct(
    "address" / Bytes(32),
    "verified" / Flag,
    "share" / Int8ul)

DATA_V2_LAYOUT = Struct(
    "name" / BORSH_STRING,
    "symbol" / BORSH_STRING,
    "uri" / BORSH_STRING,
    "seller_fee_basis_points" / Int16ul,
    "has_creators" / Flag,
    "creators" / If(this.has_creators, PrefixedArray(Int32ul, CREATOR_LAYOUT)),
    # collection and uses are always None
    "collection" / Const(b"\x00"),
    "uses" / Const(b"\x00"))

CREATE_METADATA_V3_LAYOUT = Struct(
    "instruction" / Const(bytes([CREATE_METADATA_ACCOUNT_V3])),
    "data" / DATA_V2_LAYOUT,
    "is_mutable" / Flag,
    "collection_details" / Const(b"\x00"))


class Creator(object):
    def __init__(self, address, verified=True, share=MAX_CREATOR_SHARE):
        self._address = address
        self._verified = verified
        self._share = share

    @property
    def address(self):
        return self._address

    @property
    def verified(self):
        return self._verified

    @property
    def share(self):
        return self._share

    def as_layout(self):
        return {
            "address": bytes(self.address),
            "verified": self.verified,
            "share": self.share}


def __check_length(field, value, limit):
    if len(value.encode("utf-8")) > limit:
        raise DataException(
            "Metadata {} exceeds {} bytes".format(field, limit))


def encode_create_metadata_v3(
        name, symbol, uri, seller_fee_basis_points, creators, is_mutable):
    """Serialize the CreateMetadataAccountV3 instruction data"""
    __check_length("name", name, MAX_NAME_LENGTH)
    __check_length("symbol", symbol, MAX_SYMBOL_LENGTH)
    __check_length("uri", uri, MAX_URI_LENGTH)
    return CREATE_METADATA_V3_LAYOUT.build({
        "data": {
            "name": name,
            "symbol": symbol,
            "uri": uri,
            "seller_fee_basis_points": seller_fee_basis_points,
            "has_creators": bool(creators),
            "creators": [c.as_layout() for c in creators]
            if creators else None},
        "is_mutable": is_mutable})


def decode_create_metadata_v3(data):
    """Parse CreateMetadataAccountV3 instruction data"""
    return CREATE_METADATA_V3_LAYOUT.parse(data)


def create_metadata_account_v3(
        metadata, mint, mint_authority, payer, update_authority,
        name, symbol, uri, creators, is_mutable,
        seller_fee_basis_points=0):
    """Creates the CreateMetadataAccountV3 instruction

    The update authority is always a signer. The optional rent account
    is omitted, its slot is filled with the metadata program id.
    """
    accounts = [
        AccountMeta(pubkey=metadata, is_signer=False, is_writable=True),
        AccountMeta(pubkey=mint, is_signer=False, is_writable=False),
        AccountMeta(pubkey=mint_authority, is_signer=True, is_writable=False),
        AccountMeta(pubkey=payer, is_signer=True, is_writable=True),
        AccountMeta(
            pubkey=update_authority, is_signer=True, is_writable=False),
        AccountMeta(pubkey=SYS_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(
            pubkey=Address.METADATA_PROGRAM_ID,
            is_signer=False, is_writable=False)]
    return Instruction(
        program_id=Address.METADATA_PROGRAM_ID,
        data=encode_create_metadata_v3(
            name, symbol, uri, seller_fee_basis_points, creators, is_mutable),
        accounts=accounts)
