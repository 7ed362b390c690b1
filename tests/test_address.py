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


import unittest

from solders.pubkey import Pubkey
from spl.token.instructions import get_associated_token_address

from modules.address import Address
from modules.exceptions import DataException


class TestAddress(unittest.TestCase):

    def setUp(self):
        self.owner = Pubkey.new_unique()
        self.mint = Pubkey.new_unique()

    def test_holding_address_is_associated_token_account(self):
        self.assertEqual(
            Address.holding_address(self.owner, self.mint),
            get_associated_token_address(self.owner, self.mint))

    def test_holding_address_deterministic(self):
        self.assertEqual(
            Address.holding_address(self.owner, self.mint),
            Address.holding_address(str(self.owner), str(self.mint)))

    def test_holding_address_differs_per_owner(self):
        self.assertNotEqual(
            Address.holding_address(self.owner, self.mint),
            Address.holding_address(Pubkey.new_unique(), self.mint))

    def test_metadata_address(self):
        expected, _ = Pubkey.find_program_address(
            [b"metadata", bytes(Address.METADATA_PROGRAM_ID),
             bytes(self.mint)],
            Address.METADATA_PROGRAM_ID)
        self.assertEqual(Address.metadata_address(self.mint), expected)
        self.assertNotEqual(
            Address.metadata_address(self.mint),
            Address.metadata_address(Pubkey.new_unique()))

    def test_pubkey_parses_base58(self):
        self.assertEqual(Address.pubkey(str(self.owner)), self.owner)
        self.assertIs(Address.pubkey(self.owner), self.owner)

    def test_invalid_addresses(self):
        for bad in ["", "not-an-address", "0OIl", 42, None]:
            self.assertFalse(Address.valid_address(bad))
        with self.assertRaises(DataException):
            Address.pubkey("not-an-address")
        self.assertTrue(Address.valid_address(str(self.owner)))
