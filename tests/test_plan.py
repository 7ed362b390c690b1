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


import itertools
import unittest

from solders.pubkey import Pubkey
from solders.system_program import decode_create_account
from spl.token.constants import MINT_LEN, TOKEN_PROGRAM_ID
from spl.token.instructions import decode_mint_to, decode_set_authority
from spl.token.models import AuthorityType

from modules.address import Address
from modules.metadata import decode_create_metadata_v3
from modules.request import token_request_from_dict
from shared.plan import (
    PLAN_PREFIX, METADATA_URI, Operation, build_plan, revocations)

from solmint_test.ledger_double import MINT_RENT
from solmint_test.request_factory import request_data


class TestInstructionPlan(unittest.TestCase):

    def setUp(self):
        self.authority = Pubkey.new_unique()
        self.asset = Pubkey.new_unique()

    def _plan(self, **overrides):
        token_request = token_request_from_dict(request_data(**overrides))
        return build_plan(
            token_request,
            self.authority,
            self.asset,
            Address.holding_address(token_request.owner, self.asset),
            Address.metadata_address(self.asset),
            MINT_RENT)

    def test_prefix_and_revocations_for_every_flag_combination(self):
        for revoke_mint, revoke_freeze, revoke_update in itertools.product(
                [False, True], repeat=3):
            plan = self._plan(
                revokeMint=revoke_mint,
                revokeFreeze=revoke_freeze,
                revokeUpdate=revoke_update)
            expected = list(PLAN_PREFIX)
            if revoke_mint:
                expected.append(Operation.REVOKE_MINT)
            if revoke_freeze:
                expected.append(Operation.REVOKE_FREEZE)
            self.assertEqual(list(plan.operations), expected)
            self.assertEqual(len(plan), 5 + revoke_mint + revoke_freeze)
            self.assertEqual(
                plan.step(Operation.ATTACH_METADATA).details['is_mutable'],
                not revoke_update)

    def test_default_request(self):
        plan = self._plan()
        self.assertEqual(len(plan), 5)
        self.assertEqual(plan.fee_payer, self.authority)
        self.assertEqual(plan.signers, (self.authority, self.asset))

        allocate = decode_create_account(
            plan.step(Operation.ALLOCATE).instruction)
        self.assertEqual(allocate['lamports'], MINT_RENT)
        self.assertEqual(allocate['space'], MINT_LEN)
        self.assertEqual(allocate['owner'], TOKEN_PROGRAM_ID)
        self.assertEqual(allocate['to_pubkey'], self.asset)

        mint = decode_mint_to(plan.step(Operation.MINT).instruction)
        self.assertEqual(mint.amount, 1000000000000)
        self.assertEqual(mint.mint_authority, self.authority)
        self.assertEqual(
            plan.step(Operation.MINT).details['amount'], 1000000000000)

    def test_revoke_mint_only(self):
        plan = self._plan(decimals=6, supply=1000000, revokeMint=True)
        self.assertEqual(len(plan), 6)
        self.assertEqual(
            decode_mint_to(plan.step(Operation.MINT).instruction).amount,
            1000000000000)
        self.assertTrue(
            plan.step(Operation.ATTACH_METADATA).details["is_mutable"])
        self.assertIsNone(plan.step(Operation.REVOKE_FREEZE))
        revoke = decode_set_authority(
            plan.step(Operation.REVOKE_MINT).instruction)
        self.assertEqual(revoke.authority, AuthorityType.MINT_TOKENS)
        self.assertEqual(revoke.account, self.asset)
        self.assertEqual(revoke.current_authority, self.authority)
        self.assertIsNone(revoke.new_authority)

    def test_revoke_everything(self):
        plan = self._plan(
            decimals=0, supply=1,
            revokeMint=True, revokeFreeze=True, revokeUpdate=True)
        self.assertEqual(len(plan), 7)
        self.assertEqual(
            decode_mint_to(plan.step(Operation.MINT).instruction).amount, 1)
        freeze = decode_set_authority(
            plan.step(Operation.REVOKE_FREEZE).instruction)
        self.assertEqual(freeze.authority, AuthorityType.FREEZE_ACCOUNT)
        self.assertIsNone(freeze.new_authority)
        metadata = decode_create_metadata_v3(
            plan.step(Operation.ATTACH_METADATA).instruction.data)
        self.assertFalse(metadata.is_mutable)

    def test_metadata_instruction(self):
        plan = self._plan(revokeMint=True)
        step = plan.step(Operation.ATTACH_METADATA)
        instruction = step.instruction
        self.assertEqual(instruction.program_id, Address.METADATA_PROGRAM_ID)
        self.assertEqual(
            instruction.accounts[0].pubkey,
            Address.metadata_address(self.asset))
        self.assertEqual(instruction.accounts[1].pubkey, self.asset)
        self.assertTrue(instruction.accounts[4].is_signer)
        self.assertEqual(instruction.accounts[4].pubkey, self.authority)

        metadata = decode_create_metadata_v3(instruction.data)
        self.assertTrue(metadata.is_mutable)
        self.assertEqual(metadata.data.name, 'Test Token')
        self.assertEqual(metadata.data.symbol, 'TEST')
        self.assertEqual(metadata.data.uri, METADATA_URI)
        self.assertEqual(metadata.data.seller_fee_basis_points, 0)
        self.assertEqual(len(metadata.data.creators), 1)
        creator = metadata.data.creators[0]
        self.assertEqual(creator.address, bytes(self.authority))
        self.assertTrue(creator.verified)
        self.assertEqual(creator.share, 100)

    def test_holding_created_for_requester(self):
        plan = self._plan()
        step = plan.step(Operation.CREATE_HOLDING)
        owner = Pubkey.from_string(request_data()['walletAddress'])
        self.assertEqual(
            step.details['holding'],
            Address.holding_address(owner, self.asset))
        self.assertEqual(step.details['owner'], owner)
        mint = decode_mint_to(plan.step(Operation.MINT).instruction)
        self.assertEqual(mint.dest, step.details['holding'])

    def test_revocations_shape(self):
        self.assertEqual(
            revocations(False, False, self.authority, self.asset), ())
        both = revocations(True, True, self.authority, self.asset)
        self.assertEqual(
            [s.operation for s in both],
            [Operation.REVOKE_MINT, Operation.REVOKE_FREEZE])
        only_freeze = revocations(False, True, self.authority, self.asset)
        self.assertEqual(
            [s.operation for s in only_freeze], [Operation.REVOKE_FREEZE])

    def test_plan_is_deterministic(self):
        first = self._plan(revokeMint=True)
        second = self._plan(revokeMint=True)
        self.assertEqual(first.instructions, second.instructions)
