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


"""plan - token creation instruction plan

Builds the ordered instructions that create, fund, describe and
optionally lock down a new token. Pure, no ledger access.
"""

import enum

from solders.system_program import CreateAccountParams, create_account
from spl.token.constants import MINT_LEN, TOKEN_PROGRAM_ID
from spl.token.instructions import (
    create_associated_token_account, initialize_mint, mint_to,
    set_authority)
from spl.token.models import (
    AuthorityType, InitializeMintParams, MintToParams, SetAuthorityParams)

from modules.metadata import Creator, create_metadata_account_v3

# Off chain content hosting is not wired in, the uri stays empty
METADATA_URI = ""
SELLER_FEE_BASIS_POINTS = 0


class Operation(enum.Enum):
    ALLOCATE = 'allocate'
    INITIALIZE = 'initialize'
    CREATE_HOLDING = 'create-holding'
    MINT = 'mint'
    ATTACH_METADATA = 'attach-metadata'
    REVOKE_MINT = 'revoke-mint'
    REVOKE_FREEZE = 'revoke-freeze'


# Present in every plan, in this order
PLAN_PREFIX = (
    Operation.ALLOCATE,
    Operation.INITIALIZE,
    Operation.CREATE_HOLDING,
    Operation.MINT,
    Operation.ATTACH_METADATA)

REVOCATIONS = (Operation.REVOKE_MINT, Operation.REVOKE_FREEZE)


class PlannedInstruction(object):
    """One step of a plan and the accounts that must sign for it"""

    def __init__(self, operation, instruction, signers, details=None):
        self._operation = operation
        self._instruction = instruction
        self._signers = frozenset(signers)
        self._details = dict(details or {})

    @property
    def operation(self):
        return self._operation

    @property
    def instruction(self):
        return self._instruction

    @property
    def signers(self):
        return self._signers

    @property
    def details(self):
        return dict(self._details)

    def __repr__(self):
        return 'PlannedInstruction({})'.format(self.operation.value)


class InstructionPlan(object):
    """Ordered, all or nothing sequence of planned instructions"""

    def __init__(self, fee_payer, steps):
        self._fee_payer = fee_payer
        self._steps = tuple(steps)

    @property
    def fee_payer(self):
        return self._fee_payer

    @property
    def steps(self):
        return self._steps

    @property
    def operations(self):
        return tuple(s.operation for s in self._steps)

    @property
    def instructions(self):
        return [s.instruction for s in self._steps]

    @property
    def signers(self):
        """Declared signers, fee payer first then in order of appearance"""
        ordered = [self._fee_payer]
        for step in self._steps:
            for signer in sorted(step.signers, key=bytes):
                if signer not in ordered:
                    ordered.append(signer)
        return tuple(ordered)

    def step(self, operation):
        for candidate in self._steps:
            if candidate.operation is operation:
                return candidate
        return None

    def __len__(self):
        return len(self._steps)

    def __iter__(self):
        return iter(self._steps)


def _allocate(ingest):
    """Create the mint account, funded by the authority"""
    token_request, authority, asset, _, _, rent = ingest
    return PlannedInstruction(
        Operation.ALLOCATE,
        create_account(CreateAccountParams(
            from_pubkey=authority,
            to_pubkey=asset,
            lamports=rent,
            space=MINT_LEN,
            owner=TOKEN_PROGRAM_ID)),
        [authority, asset],
        {'lamports': rent, 'space': MINT_LEN})


def _initialize(ingest):
    """Type the account as a mint, authority holds mint and freeze"""
    token_request, authority, asset, _, _, _ = ingest
    return PlannedInstruction(
        Operation.INITIALIZE,
        initialize_mint(InitializeMintParams(
            decimals=token_request.decimals,
            program_id=TOKEN_PROGRAM_ID,
            mint=asset,
            mint_authority=authority,
            freeze_authority=authority)),
        [],
        {'decimals': token_request.decimals})


def _create_holding(ingest):
    """Associated token account of the requester"""
    token_request, authority, asset, holding, _, _ = ingest
    return PlannedInstruction(
        Operation.CREATE_HOLDING,
        create_associated_token_account(
            authority, token_request.owner, asset),
        [authority],
        {'holding': holding, 'owner': token_request.owner})


def _mint(ingest):
    token_request, authority, asset, holding, _, _ = ingest
    amount = token_request.base_units
    return PlannedInstruction(
        Operation.MINT,
        mint_to(MintToParams(
            program_id=TOKEN_PROGRAM_ID,
            mint=asset,
            dest=holding,
            mint_authority=authority,
            amount=amount)),
        [authority],
        {'amount': amount})


def _attach_metadata(ingest):
    """Metadata record, the only place update authority can be revoked"""
    token_request, authority, asset, _, metadata, _ = ingest
    is_mutable = not token_request.revoke_update
    return PlannedInstruction(
        Operation.ATTACH_METADATA,
        create_metadata_account_v3(
            metadata=metadata,
            mint=asset,
            mint_authority=authority,
            payer=authority,
            update_authority=authority,
            name=token_request.token_name,
            symbol=token_request.token_symbol,
            uri=METADATA_URI,
            creators=[Creator(authority)],
            is_mutable=is_mutable,
            seller_fee_basis_points=SELLER_FEE_BASIS_POINTS),
        [authority],
        {'metadata': metadata, 'is_mutable': is_mutable})


def _revoke(operation, authority_type, authority, asset):
    return PlannedInstruction(
        operation,
        set_authority(SetAuthorityParams(
            program_id=TOKEN_PROGRAM_ID,
            account=asset,
            authority=authority_type,
            current_authority=authority,
            new_authority=None)),
        [authority],
        {'authority_type': authority_type})


def revocations(revoke_mint, revoke_freeze, authority, asset):
    """Authority revocations selected by the flags, always mint first"""
    selected = (
        (revoke_mint, Operation.REVOKE_MINT, AuthorityType.MINT_TOKENS),
        (revoke_freeze, Operation.REVOKE_FREEZE,
         AuthorityType.FREEZE_ACCOUNT))
    return tuple(
        _revoke(operation, authority_type, authority, asset)
        for flag, operation, authority_type in selected if flag)


def build_plan(token_request, authority, asset, holding, metadata, rent):
    """Build the instruction plan for one token creation

    Args:
        token_request (TokenRequest): validated request
        authority (Pubkey): server authority address
        asset (Pubkey): address of the freshly generated mint keypair
        holding (Pubkey): derived holding address of the requester
        metadata (Pubkey): derived metadata address of the mint
        rent (int): lamports keeping a mint account rent exempt

    Returns:
        InstructionPlan: the ordered plan with the authority as fee payer
    """
    ingest = (token_request, authority, asset, holding, metadata, rent)
    prefix = [build(ingest) for build in (
        _allocate, _initialize, _create_holding, _mint, _attach_metadata)]
    return InstructionPlan(
        authority,
        prefix + list(revocations(
            token_request.revoke_mint,
            token_request.revoke_freeze,
            authority, asset)))
