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


import io
import json
import unittest

from modules.exceptions import DataException
from modules.request import (
    U64_MAX, scaled_supply, token_request_from_dict,
    token_request_from_multipart)

from solmint_test.request_factory import (
    WALLET_ADDRESS, request_data, multipart_fields)


class TestTokenRequest(unittest.TestCase):

    def _rejects(self, fields, message=None):
        with self.assertRaises(DataException) as ctx:
            token_request_from_multipart(fields)
        if message:
            self.assertIn(message, str(ctx.exception))
        self.assertEqual(ctx.exception.status, 400)

    def test_valid_request(self):
        token_request = token_request_from_multipart(multipart_fields())
        self.assertEqual(token_request.decimals, 9)
        self.assertEqual(token_request.supply, 1000)
        self.assertEqual(token_request.base_units, 1000 * 10 ** 9)
        self.assertEqual(token_request.wallet_address, WALLET_ADDRESS)
        self.assertEqual(str(token_request.owner), WALLET_ADDRESS)
        self.assertEqual(token_request.token_symbol, 'TEST')
        self.assertFalse(token_request.revoke_mint)

    def test_data_as_bytes_and_file(self):
        raw = json.dumps(request_data(revokeFreeze=True)).encode('utf-8')
        for field in [raw, io.BytesIO(raw)]:
            token_request = token_request_from_multipart({'data': field})
            self.assertTrue(token_request.revoke_freeze)

    def test_missing_data_field(self):
        self._rejects({}, "Missing 'data' field in request.")
        self._rejects(None, "Missing 'data' field in request.")
        self._rejects({'other': '{}'}, "Missing 'data' field in request.")

    def test_malformed_data(self):
        self._rejects({'data': '{decimals: 9'}, "Malformed 'data' field")
        self._rejects({'data': '[1, 2]'}, "JSON object")

    def test_missing_keys(self):
        data = request_data()
        del data['tokenSymbol']
        self._rejects({'data': json.dumps(data)}, "Missing keys tokenSymbol")

    def test_wrong_types(self):
        self._rejects(multipart_fields(decimals="9"), "decimals")
        self._rejects(multipart_fields(supply=10.5), "supply")
        self._rejects(multipart_fields(supply=True), "supply")
        self._rejects(multipart_fields(revokeMint="true"), "revokeMint")
        self._rejects(multipart_fields(revokeUpdate=1), "revokeUpdate")
        self._rejects(multipart_fields(tokenName=7), "tokenName")

    def test_out_of_range(self):
        self._rejects(multipart_fields(decimals=256), "decimals")
        self._rejects(multipart_fields(decimals=-1), "decimals")
        self._rejects(multipart_fields(supply=-5), "supply")
        self._rejects(multipart_fields(supply=U64_MAX + 1), "supply")

    def test_name_and_symbol_limits(self):
        self._rejects(multipart_fields(tokenName='n' * 33), "tokenName")
        self._rejects(multipart_fields(tokenSymbol='S' * 11), "tokenSymbol")
        token_request_from_dict(request_data(
            tokenName='n' * 32, tokenSymbol='S' * 10))

    def test_invalid_wallet(self):
        self._rejects(
            multipart_fields(walletAddress='not-a-wallet'),
            "Invalid user wallet address.")

    def test_supply_overflow(self):
        self._rejects(
            multipart_fields(decimals=255, supply=U64_MAX), "overflows")
        self._rejects(multipart_fields(decimals=20, supply=1), "overflows")
        token_request = token_request_from_dict(
            request_data(decimals=19, supply=1))
        self.assertEqual(token_request.base_units, 10 ** 19)
        token_request = token_request_from_dict(
            request_data(decimals=0, supply=U64_MAX))
        self.assertEqual(token_request.base_units, U64_MAX)

    def test_zero_supply_allowed(self):
        token_request = token_request_from_dict(request_data(supply=0))
        self.assertEqual(token_request.base_units, 0)

    def test_scaled_supply(self):
        self.assertEqual(scaled_supply(1000, 9), 1000000000000)
        self.assertEqual(scaled_supply(7, 0), 7)
        with self.assertRaises(DataException):
            scaled_supply(U64_MAX, 1)

    def test_lone_surrogate_text(self):
        self._rejects(
            multipart_fields(tokenName='\ud800'), "tokenName")
        self._rejects(
            multipart_fields(tokenSymbol='A\udfff'), "tokenSymbol")
        self._rejects(
            multipart_fields(description='\ud800 text'), "description")

    def test_deeply_nested_data(self):
        self._rejects({'data': '[' * 100000}, "Malformed 'data' field")
